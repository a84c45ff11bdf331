"""
Resolution des metadonnees par chaine de fournisseurs.

Le resolver interroge une liste ordonnee de fournisseurs (TMDB, TVDB) et
retourne le premier resultat non vide. L'ordre depend du type de requete :
chaque catalogue a de meilleures donnees pour un type de contenu.

    MOVIE : tmdb puis tvdb
    SHOW  : tvdb puis tmdb

Chaque appel fournisseur se fait en deux temps : recherche (premier
resultat seulement) puis details du candidat. Un resultat est accepte ou
rejete en bloc, jamais fusionne avec celui d'un autre fournisseur.

Un fournisseur desactive (sans cle API) est ignore. Un fournisseur
indisponible (authentification, reseau, rate limiting) est journalise et
la chaine continue. None signifie "introuvable" : ce n'est pas une erreur.
"""

from collections.abc import Iterable, Mapping
from typing import Optional

import httpx
from loguru import logger

from src.adapters.api.retry import RateLimitError
from src.core.entities import MediaMetadata
from src.core.exceptions import ProviderUnavailableError
from src.core.ports.api_clients import IMetadataProvider
from src.core.value_objects import MediaKind

# Ordre d'interrogation des fournisseurs par type de requete
PROVIDER_ORDER: Mapping[MediaKind, tuple[str, ...]] = {
    MediaKind.MOVIE: ("tmdb", "tvdb"),
    MediaKind.SHOW: ("tvdb", "tmdb"),
}

# Erreurs qui rendent un fournisseur indisponible pour l'appel en cours
PROVIDER_ERRORS = (ProviderUnavailableError, httpx.HTTPError, RateLimitError)


class MetadataResolver:
    """
    Service de resolution des metadonnees (sans etat).

    Example:
        resolver = MetadataResolver([tmdb_client, tvdb_client])
        metadata = await resolver.resolve_movie("Inception", 2010)
    """

    def __init__(
        self,
        providers: Iterable[IMetadataProvider],
        order: Mapping[MediaKind, tuple[str, ...]] = PROVIDER_ORDER,
    ) -> None:
        self._providers = {provider.source: provider for provider in providers}
        self._order = order

    def providers_for(self, kind: MediaKind) -> list[IMetadataProvider]:
        """Retourne les fournisseurs actifs, dans l'ordre propre a `kind`."""
        return [
            self._providers[source]
            for source in self._order.get(kind, ())
            if source in self._providers and self._providers[source].enabled
        ]

    async def resolve_movie(
        self, title: str, year: Optional[int] = None
    ) -> Optional[MediaMetadata]:
        """Resout un film. Retourne None si aucun fournisseur ne le connait."""
        return await self._resolve(MediaKind.MOVIE, title, year)

    async def resolve_tv(
        self, title: str, year: Optional[int] = None
    ) -> Optional[MediaMetadata]:
        """Resout une serie. Retourne None si aucun fournisseur ne la connait."""
        return await self._resolve(MediaKind.SHOW, title, year)

    async def _resolve(
        self, kind: MediaKind, title: str, year: Optional[int]
    ) -> Optional[MediaMetadata]:
        providers = self.providers_for(kind)
        if not providers:
            logger.warning("Aucun fournisseur de metadonnees configure", kind=kind.value)
            return None

        for provider in providers:
            try:
                metadata = await self._lookup(provider, kind, title, year)
            except PROVIDER_ERRORS as e:
                logger.warning(
                    "Fournisseur indisponible, passage au suivant",
                    source=provider.source,
                    title=title,
                    error=str(e),
                )
                continue
            if metadata is not None:
                logger.debug(
                    "Metadonnees resolues",
                    source=provider.source,
                    title=metadata.title,
                    year=metadata.year,
                )
                return metadata

        logger.info("Metadonnees introuvables", title=title, year=year, kind=kind.value)
        return None

    @staticmethod
    async def _lookup(
        provider: IMetadataProvider, kind: MediaKind, title: str, year: Optional[int]
    ) -> Optional[MediaMetadata]:
        if kind == MediaKind.MOVIE:
            candidate = await provider.search_movie(title, year)
        else:
            candidate = await provider.search_tv(title, year)
        if candidate is None:
            return None
        return await provider.fetch_details(candidate.id, kind)

    async def download_image(self, url: str) -> Optional[bytes]:
        """
        Telecharge une image via le premier fournisseur qui y parvient.

        Ordre : tmdb puis tvdb (les URLs sont absolues, n'importe quel
        fournisseur peut les recuperer).
        """
        for provider in self.providers_for(MediaKind.MOVIE):
            try:
                data = await provider.download_image(url)
            except PROVIDER_ERRORS as e:
                logger.warning("Echec du telechargement d'image", source=provider.source, error=str(e))
                continue
            if data:
                return data
        return None

    async def close(self) -> None:
        """Ferme les clients de tous les fournisseurs."""
        for provider in self._providers.values():
            await provider.close()
