"""
Fournisseur de metadonnees en memoire pour les tests (sans reseau).
"""

from typing import Optional

from src.core.entities import MediaMetadata
from src.core.ports.api_clients import IMetadataProvider, SearchCandidate
from src.core.value_objects import MediaKind


class FakeProvider(IMetadataProvider):
    """
    Fournisseur en memoire.

    `catalog` associe (kind, titre en minuscules) a des MediaMetadata.
    Chaque appel est trace dans `calls` pour verifier l'ordre de la chaine.
    """

    def __init__(
        self,
        name: str,
        catalog: Optional[dict[tuple[MediaKind, str], MediaMetadata]] = None,
        enabled: bool = True,
        error: Optional[Exception] = None,
        image: Optional[bytes] = None,
    ) -> None:
        self._name = name
        self._catalog = catalog or {}
        self._enabled = enabled
        self._error = error
        self._image = image
        self.calls: list[tuple[str, str]] = []

    @property
    def source(self) -> str:
        return self._name

    @property
    def enabled(self) -> bool:
        return self._enabled

    async def _search(self, kind: MediaKind, title: str) -> Optional[SearchCandidate]:
        self.calls.append(("search", title))
        if self._error is not None:
            raise self._error
        metadata = self._catalog.get((kind, title.lower()))
        if metadata is None:
            return None
        return SearchCandidate(
            id=metadata.external_id or title,
            title=metadata.title,
            kind=kind,
            source=self._name,
            year=metadata.year,
        )

    async def search_movie(self, title, year=None):
        return await self._search(MediaKind.MOVIE, title)

    async def search_tv(self, title, year=None):
        return await self._search(MediaKind.SHOW, title)

    async def fetch_details(self, candidate_id, kind):
        self.calls.append(("details", candidate_id))
        for (entry_kind, _), metadata in self._catalog.items():
            if entry_kind == kind and (metadata.external_id or metadata.title) == candidate_id:
                return metadata
        return None

    async def download_image(self, url):
        self.calls.append(("image", url))
        return self._image


def movie_metadata(
    title: str, year: Optional[int] = None, source: str = "tmdb", **kwargs
) -> MediaMetadata:
    """Construit des metadonnees de film pour les tests."""
    return MediaMetadata(
        title=title,
        kind=MediaKind.MOVIE,
        source=source,
        year=year,
        external_id=kwargs.pop("external_id", f"{source}-{title.lower()}"),
        **kwargs,
    )


def show_metadata(
    title: str, year: Optional[int] = None, source: str = "tvdb", **kwargs
) -> MediaMetadata:
    """Construit des metadonnees de serie pour les tests."""
    return MediaMetadata(
        title=title,
        kind=MediaKind.SHOW,
        source=source,
        year=year,
        external_id=kwargs.pop("external_id", f"{source}-{title.lower()}"),
        **kwargs,
    )
