"""
Tests unitaires pour MetadataResolver.

Ces tests verifient:
- L'ordre de la chaine (films: tmdb puis tvdb, series: tvdb puis tmdb)
- Le passage au fournisseur suivant sur absence de resultat ou indisponibilite
- L'exclusion des fournisseurs sans cle
- Le resultat accepte tel quel (aucune fusion de champs)
"""

import httpx
import pytest

from src.adapters.api.retry import RateLimitError
from src.core.exceptions import ProviderUnavailableError
from src.core.value_objects import MediaKind
from src.services.metadata_resolver import MetadataResolver
from tests.fixtures.providers import FakeProvider, movie_metadata, show_metadata


class TestProviderOrder:
    """Tests de l'ordre des fournisseurs."""

    def test_movie_order(self) -> None:
        resolver = MetadataResolver([FakeProvider("tvdb"), FakeProvider("tmdb")])
        assert [p.source for p in resolver.providers_for(MediaKind.MOVIE)] == ["tmdb", "tvdb"]

    def test_show_order(self) -> None:
        resolver = MetadataResolver([FakeProvider("tmdb"), FakeProvider("tvdb")])
        assert [p.source for p in resolver.providers_for(MediaKind.SHOW)] == ["tvdb", "tmdb"]

    def test_disabled_provider_excluded(self) -> None:
        resolver = MetadataResolver([FakeProvider("tmdb", enabled=False), FakeProvider("tvdb")])
        assert [p.source for p in resolver.providers_for(MediaKind.MOVIE)] == ["tvdb"]


class TestResolveMovie:
    """Tests de resolve_movie."""

    @pytest.mark.asyncio
    async def test_primary_hit_stops_chain(self) -> None:
        tmdb = FakeProvider(
            "tmdb", {(MediaKind.MOVIE, "inception"): movie_metadata("Inception", 2010)}
        )
        tvdb = FakeProvider("tvdb")
        resolver = MetadataResolver([tmdb, tvdb])

        metadata = await resolver.resolve_movie("Inception", 2010)

        assert metadata is not None
        assert metadata.source == "tmdb"
        assert tvdb.calls == []

    @pytest.mark.asyncio
    async def test_fallback_when_primary_has_no_result(self) -> None:
        tmdb = FakeProvider("tmdb")
        tvdb = FakeProvider(
            "tvdb",
            {(MediaKind.MOVIE, "obscure"): movie_metadata("Obscure", 2001, source="tvdb")},
        )
        resolver = MetadataResolver([tmdb, tvdb])

        metadata = await resolver.resolve_movie("Obscure", 2001)

        assert metadata is not None
        assert metadata.source == "tvdb"
        assert tmdb.calls == [("search", "Obscure")]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            ProviderUnavailableError("tmdb", "401"),
            httpx.ConnectError("refused"),
            RateLimitError(retry_after=10),
        ],
    )
    async def test_fallback_when_primary_unavailable(self, error: Exception) -> None:
        tmdb = FakeProvider("tmdb", error=error)
        tvdb = FakeProvider(
            "tvdb", {(MediaKind.MOVIE, "heat"): movie_metadata("Heat", 1995, source="tvdb")}
        )
        resolver = MetadataResolver([tmdb, tvdb])

        metadata = await resolver.resolve_movie("Heat", 1995)

        assert metadata is not None
        assert metadata.source == "tvdb"

    @pytest.mark.asyncio
    async def test_all_providers_miss(self) -> None:
        resolver = MetadataResolver([FakeProvider("tmdb"), FakeProvider("tvdb")])
        assert await resolver.resolve_movie("Nothing") is None

    @pytest.mark.asyncio
    async def test_no_provider_configured(self) -> None:
        resolver = MetadataResolver([FakeProvider("tmdb", enabled=False)])
        assert await resolver.resolve_movie("Anything") is None

    @pytest.mark.asyncio
    async def test_unexpected_error_propagates(self) -> None:
        resolver = MetadataResolver([FakeProvider("tmdb", error=KeyError("id"))])
        with pytest.raises(KeyError):
            await resolver.resolve_movie("Broken")


class TestResolveTv:
    """Tests de resolve_tv."""

    @pytest.mark.asyncio
    async def test_tvdb_first_for_shows(self) -> None:
        tmdb = FakeProvider(
            "tmdb", {(MediaKind.SHOW, "dark"): show_metadata("Dark", 2017, source="tmdb")}
        )
        tvdb = FakeProvider("tvdb", {(MediaKind.SHOW, "dark"): show_metadata("Dark", 2017)})
        resolver = MetadataResolver([tmdb, tvdb])

        metadata = await resolver.resolve_tv("Dark")

        assert metadata is not None
        assert metadata.source == "tvdb"
        assert tmdb.calls == []

    @pytest.mark.asyncio
    async def test_tmdb_fallback_for_shows(self) -> None:
        tmdb = FakeProvider(
            "tmdb", {(MediaKind.SHOW, "dark"): show_metadata("Dark", 2017, source="tmdb")}
        )
        tvdb = FakeProvider("tvdb", error=ProviderUnavailableError("tvdb", "login"))
        resolver = MetadataResolver([tmdb, tvdb])

        metadata = await resolver.resolve_tv("Dark")

        assert metadata is not None
        assert metadata.source == "tmdb"


class TestDownloadImage:
    """Tests de download_image."""

    @pytest.mark.asyncio
    async def test_first_provider_with_data_wins(self) -> None:
        resolver = MetadataResolver(
            [FakeProvider("tmdb", image=None), FakeProvider("tvdb", image=b"poster")]
        )
        assert await resolver.download_image("https://img/poster.jpg") == b"poster"

    @pytest.mark.asyncio
    async def test_no_image(self) -> None:
        resolver = MetadataResolver([FakeProvider("tmdb")])
        assert await resolver.download_image("https://img/poster.jpg") is None
