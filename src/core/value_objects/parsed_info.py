"""
Objets valeur pour les informations de parsing de noms de fichiers.

Objets valeur immutables representant l'identite media extraite d'un nom
de fichier brut (film, episode ou inconnu).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MediaKind(Enum):
    """Nature d'un media, detectee depuis le nom de fichier ou fournie par un catalogue.

    Valeurs:
        MOVIE: Film (long-metrage)
        EPISODE: Episode de serie (avec saison/episode)
        SHOW: Serie TV prise dans son ensemble (resultat catalogue)
        UNKNOWN: Nom de fichier non reconnu
    """

    MOVIE = "movie"
    EPISODE = "episode"
    SHOW = "show"
    UNKNOWN = "unknown"


# Bornes d'acceptation d'une annee candidate
MIN_YEAR = 1900
MAX_YEAR = 2100


@dataclass(frozen=True)
class ParsedName:
    """
    Identite media extraite d'un nom de fichier.

    Attributs:
        kind: MOVIE, EPISODE ou UNKNOWN
        title: Titre nettoye (ou nom sans extension si UNKNOWN)
        year: Annee comprise dans [1900, 2100], sinon None
        season: Numero de saison (EPISODE uniquement)
        episode: Numero d'episode (EPISODE uniquement)
    """

    kind: MediaKind
    title: str
    year: Optional[int] = None
    season: Optional[int] = None
    episode: Optional[int] = None

    def __post_init__(self) -> None:
        if self.year is not None and not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValueError(f"Annee hors bornes: {self.year}")
        if self.kind != MediaKind.EPISODE and (
            self.season is not None or self.episode is not None
        ):
            raise ValueError("season/episode reserves au type EPISODE")

    @property
    def is_movie(self) -> bool:
        return self.kind == MediaKind.MOVIE

    @property
    def is_episode(self) -> bool:
        return self.kind == MediaKind.EPISODE

    @property
    def is_unknown(self) -> bool:
        return self.kind == MediaKind.UNKNOWN
