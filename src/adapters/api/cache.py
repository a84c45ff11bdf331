"""
Cache disque des reponses des catalogues distants.

Le cache utilise diskcache pour la persistence sur disque, ce qui permet
de conserver les candidats et les metadonnees entre deux executions du
daemon et de limiter les appels soumis au rate limiting.

Durees de vie :
- Candidats de recherche (SEARCH_TTL): 24 heures
- Metadonnees detaillees (DETAILS_TTL): 7 jours

Seuls les resultats positifs sont stockes : une recherche sans resultat
est refaite au prochain passage.
"""

import asyncio
from functools import partial
from pathlib import Path
from typing import Any, Optional

from diskcache import Cache


class APICache:
    """
    Cache asynchrone avec TTL pour les appels aux catalogues.

    Les operations diskcache sont bloquantes : elles sont deleguees au
    pool de threads par defaut via run_in_executor.

    Example:
        cache = APICache(cache_dir=Path(".cache/api"))
        key = APICache.key("tmdb", "search", "movie", "Inception", 2010)
        await cache.set_search(key, candidate)
        candidate = await cache.get(key)
    """

    SEARCH_TTL = 24 * 60 * 60  # 86400 s
    DETAILS_TTL = 7 * 24 * 60 * 60  # 604800 s

    def __init__(self, cache_dir: Path | str = ".cache/api") -> None:
        """
        Args:
            cache_dir: Repertoire du cache (cree si inexistant)
        """
        self._cache = Cache(str(cache_dir))

    @staticmethod
    def key(source: str, operation: str, *parts: Any) -> str:
        """
        Construit une cle de cache normalisee.

        Les parties textuelles sont passees en minuscules : "Inception" et
        "inception" partagent la meme entree.
        """
        normalized = [str(p).lower() if isinstance(p, str) else str(p) for p in parts]
        return ":".join([source, operation, *normalized])

    async def get(self, key: str) -> Optional[Any]:
        """Retourne la valeur stockee, ou None si absente ou expiree."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._cache.get, key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Stocke une valeur (picklable) avec une duree de vie en secondes."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None, partial(self._cache.set, key, value, expire=ttl)
        )

    async def set_search(self, key: str, value: Any) -> None:
        """Stocke un candidat de recherche (TTL de 24h)."""
        await self.set(key, value, self.SEARCH_TTL)

    async def set_details(self, key: str, value: Any) -> None:
        """Stocke des metadonnees detaillees (TTL de 7 jours)."""
        await self.set(key, value, self.DETAILS_TTL)

    async def clear(self) -> None:
        """Supprime toutes les entrees du cache."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.clear)

    def close(self) -> None:
        """Ferme la connexion au cache (a appeler a l'arret)."""
        self._cache.close()
