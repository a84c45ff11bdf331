"""
Client TMDB pour la recherche et recuperation de metadonnees.

Implemente l'interface IMetadataProvider pour TMDB (The Movie Database),
pour les films comme pour les series. Utilise le cache persistant et le
mecanisme de retry pour gerer le rate limiting.

Usage:
    cache = APICache()
    client = TMDBClient(api_key="your_key", cache=cache)
    candidate = await client.search_movie("Avatar", year=2009)
    metadata = await client.fetch_details(candidate.id, MediaKind.MOVIE)
    await client.close()
"""

from typing import Any, Optional

import httpx
from loguru import logger

from src.adapters.api.cache import APICache
from src.adapters.api.retry import RateLimitError, request_with_retry, year_from_date
from src.core.entities import MediaMetadata
from src.core.ports.api_clients import IMetadataProvider, SearchCandidate
from src.core.value_objects import MediaKind


class TMDBClient(IMetadataProvider):
    """
    Client API TMDB.

    Implemente IMetadataProvider avec:
    - Recherche de films (/search/movie) et de series (/search/tv)
    - Details d'un film (/movie/{id}) ou d'une serie (/tv/{id})
    - Cache persistant (24h recherches, 7j details)
    - Retry automatique sur rate limiting (429)

    Attributes:
        TMDB_BASE_URL: URL de base de l'API TMDB v3
        TMDB_IMAGE_BASE_URL: URL de base des images en taille originale
    """

    TMDB_BASE_URL = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/original"

    def __init__(self, api_key: Optional[str], cache: APICache) -> None:
        """
        Initialise le client TMDB.

        Args:
            api_key: Cle API v3 ou Read Access Token v4 (None = desactive)
            cache: Instance APICache pour le caching des resultats
        """
        self._api_key = api_key
        self._cache = cache
        self._client: Optional[httpx.AsyncClient] = None
        self._image_client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, le cree si necessaire (lazy init).

        Supporte les deux modes d'authentification TMDB:
        - API Key v3 (32 caracteres hex) : passe en parametre api_key
        - Read Access Token v4 (long JWT) : passe en header Bearer
        """
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json"}
            params = {}
            if self._api_key and len(self._api_key) > 40:
                headers["Authorization"] = f"Bearer {self._api_key}"
            else:
                params["api_key"] = self._api_key or ""

            self._client = httpx.AsyncClient(
                base_url=self.TMDB_BASE_URL,
                headers=headers,
                params=params,
                timeout=httpx.Timeout(30.0, connect=10.0),
            )
        return self._client

    @property
    def source(self) -> str:
        return "tmdb"

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def search_movie(
        self, title: str, year: Optional[int] = None
    ) -> Optional[SearchCandidate]:
        """Recherche un film, retourne le premier resultat de TMDB."""
        return await self._search("/search/movie", "year", MediaKind.MOVIE, title, year)

    async def search_tv(
        self, title: str, year: Optional[int] = None
    ) -> Optional[SearchCandidate]:
        """Recherche une serie, retourne le premier resultat de TMDB."""
        return await self._search(
            "/search/tv", "first_air_date_year", MediaKind.SHOW, title, year
        )

    async def _search(
        self,
        endpoint: str,
        year_param: str,
        kind: MediaKind,
        title: str,
        year: Optional[int],
    ) -> Optional[SearchCandidate]:
        # Cache-first: verifier le cache avant toute requete HTTP
        cache_key = APICache.key(self.source, "search", kind.value, title, year)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        params: dict[str, Any] = {"query": title, "include_adult": "false"}
        if year:
            params[year_param] = year

        response = await request_with_retry(
            self._get_client(), "GET", endpoint, params=params
        )
        results = response.json().get("results", [])
        if not results:
            logger.debug("TMDB: aucun resultat", query=title, year=year, kind=kind.value)
            return None

        first = results[0]
        candidate = SearchCandidate(
            id=str(first["id"]),
            title=first.get("title") or first.get("name", ""),
            kind=kind,
            source=self.source,
            year=year_from_date(first.get("release_date") or first.get("first_air_date")),
        )
        await self._cache.set_search(cache_key, candidate)
        return candidate

    async def fetch_details(
        self, candidate_id: str, kind: MediaKind
    ) -> Optional[MediaMetadata]:
        """
        Recupere les details complets d'un film ou d'une serie.

        Args:
            candidate_id: ID TMDB
            kind: MediaKind.MOVIE ou MediaKind.SHOW

        Returns:
            MediaMetadata, ou None si TMDB repond 404
        """
        cache_key = APICache.key(self.source, "details", kind.value, candidate_id)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        if kind == MediaKind.MOVIE:
            endpoint, params = f"/movie/{candidate_id}", {}
        else:
            endpoint = f"/tv/{candidate_id}"
            params = {"append_to_response": "external_ids"}

        try:
            response = await request_with_retry(
                self._get_client(), "GET", endpoint, params=params
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise

        data = response.json()
        metadata = (
            self._movie_metadata(data)
            if kind == MediaKind.MOVIE
            else self._tv_metadata(data)
        )
        await self._cache.set_details(cache_key, metadata)
        return metadata

    def _image_url(self, path: Optional[str]) -> Optional[str]:
        return f"{self.TMDB_IMAGE_BASE_URL}{path}" if path else None

    def _movie_metadata(self, data: dict[str, Any]) -> MediaMetadata:
        return MediaMetadata(
            title=data.get("title") or data.get("original_title", ""),
            kind=MediaKind.MOVIE,
            source=self.source,
            year=year_from_date(data.get("release_date")),
            overview=data.get("overview") or None,
            poster_url=self._image_url(data.get("poster_path")),
            backdrop_url=self._image_url(data.get("backdrop_path")),
            imdb_id=data.get("imdb_id") or None,
            external_id=str(data["id"]),
            genres=tuple(g["name"] for g in data.get("genres", []) if g.get("name")),
        )

    def _tv_metadata(self, data: dict[str, Any]) -> MediaMetadata:
        external_ids = data.get("external_ids") or {}
        return MediaMetadata(
            title=data.get("name") or data.get("original_name", ""),
            kind=MediaKind.SHOW,
            source=self.source,
            year=year_from_date(data.get("first_air_date")),
            overview=data.get("overview") or None,
            poster_url=self._image_url(data.get("poster_path")),
            backdrop_url=self._image_url(data.get("backdrop_path")),
            imdb_id=external_ids.get("imdb_id") or None,
            external_id=str(data["id"]),
            genres=tuple(g["name"] for g in data.get("genres", []) if g.get("name")),
            season_count=data.get("number_of_seasons"),
            episode_count=data.get("number_of_episodes"),
        )

    async def download_image(self, url: str) -> Optional[bytes]:
        """
        Telecharge une image depuis le CDN TMDB.

        Un client dedie est utilise pour ne pas transmettre la cle API au CDN.
        """
        if self._image_client is None or self._image_client.is_closed:
            self._image_client = httpx.AsyncClient(
                timeout=httpx.Timeout(60.0, connect=10.0), follow_redirects=True
            )
        try:
            response = await request_with_retry(self._image_client, "GET", url)
        except (httpx.HTTPError, RateLimitError) as e:
            logger.warning("TMDB: echec du telechargement d'image", url=url, error=str(e))
            return None
        return response.content or None

    async def close(self) -> None:
        """
        Ferme les clients HTTP.

        Doit etre appele a la fin de l'utilisation pour liberer
        les ressources reseau.
        """
        for client in (self._client, self._image_client):
            if client is not None and not client.is_closed:
                await client.aclose()
        self._client = None
        self._image_client = None
