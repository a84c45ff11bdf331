"""
Interfaces ports pour les fournisseurs de metadonnees.

Interfaces abstraites (ports) définissant les contrats pour les catalogues
média distants. Les implémentations (adaptateurs) fournissent les clients
concrets TMDB et TVDB, chacun capable de répondre aux requêtes films et séries.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from src.core.entities.media import MediaMetadata
from src.core.value_objects import MediaKind


@dataclass(frozen=True)
class SearchCandidate:
    """
    Premier résultat retourné par une recherche distante.

    Attributs :
        id : ID spécifique au catalogue (ID TMDB ou ID TVDB)
        title : Titre retourné par la recherche
        kind : MOVIE ou SHOW
        source : Identifiant du catalogue ("tmdb" ou "tvdb")
        year : Année de sortie/diffusion si connue
    """

    id: str
    title: str
    kind: MediaKind
    source: str
    year: Optional[int] = None


class IMetadataProvider(ABC):
    """
    Interface commune des catalogues de métadonnées.

    Chaque appel de résolution se fait en deux temps : une recherche par
    titre (et année optionnelle) qui retient uniquement le premier résultat,
    puis la récupération des détails de ce candidat.
    """

    @abstractmethod
    async def search_movie(
        self, title: str, year: Optional[int] = None
    ) -> Optional[SearchCandidate]:
        """
        Recherche un film par titre.

        Args :
            title : Titre recherché
            year : Année optionnelle ajoutée à la requête

        Retourne :
            Le premier candidat, ou None si aucun résultat
        """
        ...

    @abstractmethod
    async def search_tv(
        self, title: str, year: Optional[int] = None
    ) -> Optional[SearchCandidate]:
        """Recherche une série par titre. Retourne le premier candidat ou None."""
        ...

    @abstractmethod
    async def fetch_details(
        self, candidate_id: str, kind: MediaKind
    ) -> Optional[MediaMetadata]:
        """
        Récupère les métadonnées complètes d'un candidat.

        Args :
            candidate_id : ID spécifique au catalogue
            kind : MOVIE ou SHOW

        Retourne :
            MediaMetadata complet, ou None si le catalogue ne connaît pas l'ID
        """
        ...

    @abstractmethod
    async def download_image(self, url: str) -> Optional[bytes]:
        """Télécharge une image. Retourne None en cas d'échec."""
        ...

    @property
    @abstractmethod
    def source(self) -> str:
        """Retourne l'identifiant du catalogue (ex: 'tmdb', 'tvdb')."""
        ...

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Indique si le fournisseur est configuré (clé API présente)."""
        ...

    async def close(self) -> None:
        """Libère les ressources réseau du fournisseur."""
        return None
