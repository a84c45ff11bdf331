"""
Client TVDB API v4 pour les series TV et les films.

Implemente IMetadataProvider pour rechercher et recuperer les metadonnees
depuis TheTVDB. Gere l'authentification par token, le caching et le rate
limiting automatiquement.

Authentification : POST /login {"apikey": ...} retourne un token porteur
valide 24h. Le token est conserve en memoire et renouvele une heure avant
son expiration. Un echec d'authentification rend le fournisseur indisponible
(ProviderUnavailableError) sans interrompre la chaine de resolution.

Reference API: https://thetvdb.github.io/v4-api/
"""

import asyncio
from datetime import datetime, timedelta
from typing import Any, Optional

import httpx
from loguru import logger

from src.adapters.api.cache import APICache
from src.adapters.api.retry import RateLimitError, request_with_retry, year_from_date
from src.core.entities import MediaMetadata
from src.core.exceptions import ProviderUnavailableError
from src.core.ports.api_clients import IMetadataProvider, SearchCandidate
from src.core.value_objects import MediaKind

# Types d'artwork "background" (series: 3, films: 15)
BACKGROUND_ARTWORK_TYPES = frozenset({3, 15})


class TVDBClient(IMetadataProvider):
    """
    Client TVDB pour la recherche de series et de films.

    Attributes:
        BASE_URL: URL de base de l'API TVDB v4
        ARTWORK_BASE_URL: Prefixe des chemins d'images relatifs
        TOKEN_LIFETIME: Duree de validite annoncee d'un token
        TOKEN_REFRESH_MARGIN: Avance du renouvellement sur l'expiration

    Example:
        cache = APICache(cache_dir=".cache/api")
        client = TVDBClient(api_key="your-api-key", cache=cache)
        candidate = await client.search_tv("Breaking Bad")
        metadata = await client.fetch_details(candidate.id, MediaKind.SHOW)
        await client.close()
    """

    BASE_URL = "https://api4.thetvdb.com/v4"
    ARTWORK_BASE_URL = "https://artworks.thetvdb.com"
    TOKEN_LIFETIME = timedelta(hours=24)
    TOKEN_REFRESH_MARGIN = timedelta(hours=1)

    def __init__(self, api_key: Optional[str], cache: APICache) -> None:
        """
        Initialise le client TVDB.

        Args:
            api_key: Cle API TVDB (Project API Key), None = desactive
            cache: Instance de APICache pour le caching des resultats
        """
        self._api_key = api_key
        self._cache = cache
        self._token: Optional[str] = None
        self._token_expiry: Optional[datetime] = None
        self._token_lock = asyncio.Lock()
        self._client: Optional[httpx.AsyncClient] = None
        self._image_client: Optional[httpx.AsyncClient] = None

    @property
    def source(self) -> str:
        return "tvdb"

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, cree s'il n'existe pas.

        Utilise un client unique pour beneficier du connection pooling.
        """
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.BASE_URL,
                timeout=httpx.Timeout(30.0, connect=10.0),
            )
        return self._client

    def _token_valid(self) -> bool:
        return bool(
            self._token and self._token_expiry and datetime.now() < self._token_expiry
        )

    async def _ensure_token(self) -> str:
        """
        S'assure qu'un token valide est disponible.

        Double verification sous verrou : plusieurs taches concurrentes ne
        declenchent qu'un seul appel a /login.

        Returns:
            Token porteur valide

        Raises:
            ProviderUnavailableError: Si l'authentification echoue
        """
        if self._token_valid():
            return self._token  # type: ignore[return-value]

        async with self._token_lock:
            if self._token_valid():
                return self._token  # type: ignore[return-value]

            client = await self._get_client()
            try:
                response = await client.post("/login", json={"apikey": self._api_key})
                response.raise_for_status()
                token = response.json().get("data", {}).get("token")
            except (httpx.HTTPError, ValueError) as e:
                self._token = None
                self._token_expiry = None
                raise ProviderUnavailableError(self.source, str(e)) from e

            if not token:
                raise ProviderUnavailableError(self.source, "token absent de la reponse")

            self._token = token
            self._token_expiry = (
                datetime.now() + self.TOKEN_LIFETIME - self.TOKEN_REFRESH_MARGIN
            )
            logger.debug("TVDB: token obtenu", expires_at=self._token_expiry.isoformat())
            return token

    def _get_auth_headers(self) -> dict[str, str]:
        """Retourne les headers d'authentification avec le token courant."""
        if not self._token:
            raise RuntimeError("Token not available. Call _ensure_token() first.")
        return {"Authorization": f"Bearer {self._token}"}

    async def _get(self, url: str, **kwargs) -> httpx.Response:
        """GET authentifie. Un 401 invalide le token et rend le fournisseur indisponible."""
        await self._ensure_token()
        client = await self._get_client()
        try:
            return await request_with_retry(
                client, "GET", url, headers=self._get_auth_headers(), **kwargs
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                self._token = None
                self._token_expiry = None
                raise ProviderUnavailableError(self.source, "token refuse") from e
            raise

    async def search_movie(
        self, title: str, year: Optional[int] = None
    ) -> Optional[SearchCandidate]:
        return await self._search("movie", MediaKind.MOVIE, title, year)

    async def search_tv(
        self, title: str, year: Optional[int] = None
    ) -> Optional[SearchCandidate]:
        return await self._search("series", MediaKind.SHOW, title, year)

    async def _search(
        self, search_type: str, kind: MediaKind, title: str, year: Optional[int]
    ) -> Optional[SearchCandidate]:
        """
        Recherche par titre et retourne le premier resultat.

        Verifie le cache avant d'appeler l'API. Les resultats sont caches
        pendant 24 heures.
        """
        cache_key = APICache.key(self.source, "search", search_type, title, year)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        params: dict[str, Any] = {"query": title, "type": search_type}
        if year:
            params["year"] = year

        try:
            response = await self._get("/search", params=params)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise

        results = response.json().get("data") or []
        if not results:
            logger.debug("TVDB: aucun resultat", query=title, year=year, type=search_type)
            return None

        first = results[0]
        candidate = SearchCandidate(
            id=str(first.get("tvdb_id") or first["id"]),
            title=first.get("name", ""),
            kind=kind,
            source=self.source,
            year=year_from_date(first.get("year") or first.get("first_air_time")),
        )
        await self._cache.set_search(cache_key, candidate)
        return candidate

    async def fetch_details(
        self, candidate_id: str, kind: MediaKind
    ) -> Optional[MediaMetadata]:
        """
        Recupere les details etendus d'un film ou d'une serie.

        Args:
            candidate_id: ID TVDB
            kind: MediaKind.MOVIE ou MediaKind.SHOW

        Returns:
            MediaMetadata, ou None si TVDB repond 404
        """
        cache_key = APICache.key(self.source, "details", kind.value, candidate_id)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        resource = "movies" if kind == MediaKind.MOVIE else "series"
        try:
            response = await self._get(f"/{resource}/{candidate_id}/extended")
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise

        data = response.json().get("data")
        if not data:
            return None

        metadata = self._to_metadata(data, kind)
        await self._cache.set_details(cache_key, metadata)
        return metadata

    def _image_url(self, path: Optional[str]) -> Optional[str]:
        if not path:
            return None
        if path.startswith("http"):
            return path
        return f"{self.ARTWORK_BASE_URL}{path}"

    def _to_metadata(self, data: dict[str, Any], kind: MediaKind) -> MediaMetadata:
        """Convertit une reponse /extended en MediaMetadata."""
        backdrop = next(
            (
                artwork.get("image")
                for artwork in data.get("artworks") or []
                if artwork.get("type") in BACKGROUND_ARTWORK_TYPES
            ),
            None,
        )
        imdb_id = next(
            (
                remote.get("id")
                for remote in data.get("remoteIds") or []
                if remote.get("sourceName") == "IMDB"
            ),
            None,
        )

        season_count = None
        if kind == MediaKind.SHOW:
            official = {
                season.get("number")
                for season in data.get("seasons") or []
                if (season.get("type") or {}).get("type") == "official"
                and (season.get("number") or 0) > 0
            }
            season_count = len(official) or None

        year = year_from_date(str(data["year"])) if data.get("year") else None
        if year is None:
            year = year_from_date(data.get("firstAired"))

        return MediaMetadata(
            title=data.get("name", ""),
            kind=kind,
            source=self.source,
            year=year,
            overview=data.get("overview") or None,
            poster_url=self._image_url(data.get("image")),
            backdrop_url=self._image_url(backdrop),
            imdb_id=imdb_id,
            external_id=str(data["id"]),
            genres=tuple(g["name"] for g in data.get("genres") or [] if g.get("name")),
            season_count=season_count,
        )

    async def download_image(self, url: str) -> Optional[bytes]:
        """Telecharge une image (CDN public, sans authentification)."""
        if self._image_client is None or self._image_client.is_closed:
            self._image_client = httpx.AsyncClient(
                timeout=httpx.Timeout(60.0, connect=10.0), follow_redirects=True
            )
        try:
            response = await request_with_retry(self._image_client, "GET", url)
        except (httpx.HTTPError, RateLimitError) as e:
            logger.warning("TVDB: echec du telechargement d'image", url=url, error=str(e))
            return None
        return response.content or None

    async def close(self) -> None:
        """Ferme les clients HTTP."""
        for client in (self._client, self._image_client):
            if client is not None and not client.is_closed:
                await client.aclose()
        self._client = None
        self._image_client = None
