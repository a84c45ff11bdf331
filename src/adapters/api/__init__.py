"""
Clients des catalogues de metadonnees distants.

Ce module fournit les adaptateurs pour communiquer avec les API externes:
- TMDB: The Movie Database (films et series)
- TVDB: TheTVDB v4 (series et films, authentification par token)

Infrastructure partagee:
- APICache: Cache persistant avec TTL differencies (recherche 24h, details 7j)
- RateLimitError: Exception pour les erreurs 429
- request_with_retry: Requete avec backoff exponentiel

Les clients implementent IMetadataProvider defini dans core/ports/api_clients.py.
"""

from src.adapters.api.cache import APICache
from src.adapters.api.retry import RateLimitError, request_with_retry, with_retry
from src.adapters.api.tmdb_client import TMDBClient
from src.adapters.api.tvdb_client import TVDBClient

__all__ = [
    "APICache",
    "RateLimitError",
    "TMDBClient",
    "TVDBClient",
    "request_with_retry",
    "with_retry",
]
