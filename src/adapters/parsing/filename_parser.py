"""
Parser de noms de fichiers par expressions regulieres.

Ce module fournit RegexFilenameParser qui implemente IFilenameParser.
Le parsing est deterministe et total : un nom non reconnu donne un
ParsedName de type UNKNOWN dont le titre est le nom sans extension.

Ordre d'evaluation :
    1. Motifs episode (prioritaires : un nombre de 3-4 chiffres dans un nom
       de serie est plus souvent un code d'episode qu'une annee de film)
       a. titre + annee + SxxEyy
       b. titre + SxxEyy
       c. titre + Sxx.Eyy
       d. titre + code a 3 chiffres (saison sur 1 chiffre, episode sur 2),
          jamais precede d'un prefixe de codec (H.264, x 265)
    2. Motifs film
       a. titre + annee + marqueurs de qualite/source/codec
       b. titre + annee + suffixe -GROUPE
       c. titre + annee seule
"""

import re
from pathlib import Path
from typing import Optional

from loguru import logger

from src.core.ports.parser import IFilenameParser
from src.core.value_objects import MAX_YEAR, MIN_YEAR, MediaKind, ParsedName
from src.utils.constants import QUALITY_TOKENS, VIDEO_EXTENSIONS

_SEP = r"[._\s]"
_YEAR = r"[(\[]?(?P<year>\d{4})[)\]]?"
# Un point dans un marqueur (H.264, DDP5.1) accepte aussi un espace
_QUALITY = "|".join(
    re.escape(token).replace(r"\.", r"[.\s]") for token in QUALITY_TOKENS
)

EPISODE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        rf"^(?P<title>.+?){_SEP}+{_YEAR}{_SEP}+[-\s]*S(?P<season>\d{{1,2}})E(?P<episode>\d{{1,3}})",
        re.IGNORECASE,
    ),
    re.compile(
        rf"^(?P<title>.+?)[._\s-]+S(?P<season>\d{{1,2}})E(?P<episode>\d{{1,3}})",
        re.IGNORECASE,
    ),
    re.compile(
        rf"^(?P<title>.+?)[._\s-]+S(?P<season>\d{{1,2}})[._\s-]+E(?P<episode>\d{{1,3}})",
        re.IGNORECASE,
    ),
    re.compile(
        rf"^(?P<title>.+?)[._\s-]+(?<![HhXx][._\s])(?P<season>\d)(?P<episode>\d{{2}})(?=[._\s]|$)",
        re.IGNORECASE,
    ),
)

MOVIE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(
        rf"^(?P<title>.+?){_SEP}+{_YEAR}{_SEP}+(?:{_QUALITY})(?![A-Za-z0-9])",
        re.IGNORECASE,
    ),
    re.compile(
        rf"^(?P<title>.+?){_SEP}+{_YEAR}{_SEP}*-[A-Za-z0-9]+",
    ),
    re.compile(
        rf"^(?P<title>.+?){_SEP}+{_YEAR}(?=[._\s-]|$)",
    ),
)

_QUALITY_WORDS = re.compile(rf"(?<![A-Za-z0-9])(?:{_QUALITY})(?![A-Za-z0-9])", re.IGNORECASE)
_RELEASE_GROUP = re.compile(r"\s*-\s*[A-Z0-9]{2,}$")
_EXTENSION = re.compile(
    "(?:" + "|".join(re.escape(ext) for ext in VIDEO_EXTENSIONS) + ")$",
    re.IGNORECASE,
)
_WHITESPACE = re.compile(r"\s+")


def accept_year(value: Optional[str]) -> Optional[int]:
    """
    Convertit une annee candidate en entier si elle est dans [1900, 2100].

    Une annee hors bornes est consideree comme absente, jamais comme une erreur.
    """
    if not value:
        return None
    year = int(value)
    if MIN_YEAR <= year <= MAX_YEAR:
        return year
    return None


def clean_title(raw: str) -> str:
    """
    Nettoie un fragment de nom de fichier pour en faire un titre.

    Etapes : extension retiree, separateurs . et _ remplaces par des espaces,
    marqueurs de qualite et suffixe -GROUPE retires, espaces compactes,
    puis chaque mot passe en casse titre (ASCII simple).
    """
    text = _EXTENSION.sub("", raw)
    text = text.replace(".", " ").replace("_", " ")
    text = _QUALITY_WORDS.sub(" ", text)
    text = _WHITESPACE.sub(" ", text).strip()
    text = _RELEASE_GROUP.sub("", text)
    text = text.strip(" -([")
    return " ".join(word[:1].upper() + word[1:].lower() for word in text.split(" ") if word)


class RegexFilenameParser(IFilenameParser):
    """
    Parser de noms de fichiers base sur une liste ordonnee de motifs.

    Les motifs episode sont evalues avant les motifs film ; le premier
    motif qui correspond l'emporte.
    """

    def parse(self, filename: str) -> ParsedName:
        """
        Parse un nom de fichier video.

        Args:
            filename: Nom du fichier (sans le chemin), extension comprise

        Returns:
            ParsedName de type EPISODE, MOVIE ou UNKNOWN
        """
        name = Path(filename).name

        parsed = self._match_episode(name) or self._match_movie(name)
        if parsed is not None:
            return parsed

        logger.debug("Nom de fichier non reconnu", filename=name)
        return ParsedName(kind=MediaKind.UNKNOWN, title=Path(name).stem)

    def _match_episode(self, name: str) -> Optional[ParsedName]:
        for pattern in EPISODE_PATTERNS:
            match = pattern.search(name)
            if match is None:
                continue
            title = clean_title(match.group("title"))
            if not title:
                continue
            season = self._positive(match.group("season"))
            episode = self._positive(match.group("episode"))
            if season is None or episode is None:
                continue
            groups = match.groupdict()
            return ParsedName(
                kind=MediaKind.EPISODE,
                title=title,
                year=accept_year(groups.get("year")),
                season=season,
                episode=episode,
            )
        return None

    def _match_movie(self, name: str) -> Optional[ParsedName]:
        for pattern in MOVIE_PATTERNS:
            match = pattern.search(name)
            if match is None:
                continue
            title = clean_title(match.group("title"))
            if not title:
                continue
            return ParsedName(
                kind=MediaKind.MOVIE,
                title=title,
                year=accept_year(match.group("year")),
            )
        return None

    @staticmethod
    def _positive(value: Optional[str]) -> Optional[int]:
        """Convertit un groupe saison/episode (defaut 1 si absent, None si nul)."""
        if value is None:
            return 1
        number = int(value)
        return number if number > 0 else None
