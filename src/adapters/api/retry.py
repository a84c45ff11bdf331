"""
Mecanisme de retry avec backoff exponentiel pour les catalogues distants.

Relance automatiquement les requetes sur reponse 429 (rate limiting) et
sur erreur de transport (connexion refusee, timeout), avec un delai
croissant et du jitter aleatoire. Les erreurs HTTP 4xx/5xx sont propagees
immediatement.

Usage:
    response = await request_with_retry(client, "GET", "/search/movie")
"""

from typing import Optional

import httpx
from loguru import logger
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

RETRYABLE_ERRORS = (httpx.TransportError,)


class RateLimitError(Exception):
    """
    Exception levee quand l'API retourne 429 Too Many Requests.

    Attributes:
        retry_after: Nombre de secondes a attendre (header Retry-After),
                     ou None si non specifie.
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s")


def _log_retry(retry_state: RetryCallState) -> None:
    """Trace chaque nouvelle tentative en DEBUG."""
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    logger.debug(
        "Nouvelle tentative HTTP",
        attempt=retry_state.attempt_number,
        error=type(exception).__name__ if exception else None,
    )


def with_retry(max_attempts: int = 5, max_wait: int = 60):
    """
    Decorateur pour relancer sur RateLimitError ou erreur de transport.

    Utilise wait_random_exponential pour ajouter du jitter et eviter
    que plusieurs taches ne relancent au meme instant.

    Args:
        max_attempts: Nombre maximum de tentatives (defaut: 5)
        max_wait: Delai maximum entre les tentatives en secondes (defaut: 60)

    Returns:
        Decorateur a appliquer sur une fonction async
    """
    return retry(
        retry=retry_if_exception_type((RateLimitError, *RETRYABLE_ERRORS)),
        wait=wait_random_exponential(multiplier=1, min=1, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        before_sleep=_log_retry,
        reraise=True,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 5,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP avec retry automatique.

    Args:
        client: Client httpx async a utiliser
        method: Methode HTTP (GET, POST, etc.)
        url: URL relative au base_url du client, ou absolue
        max_attempts: Nombre maximum de tentatives (defaut: 5)
        **kwargs: Arguments supplementaires passes a client.request()

    Returns:
        httpx.Response en cas de succes

    Raises:
        RateLimitError: Si 429 apres epuisement des tentatives
        httpx.TransportError: Si le reseau reste injoignable
        httpx.HTTPStatusError: Pour les autres erreurs HTTP
    """

    @with_retry(max_attempts=max_attempts)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code == 429:
            retry_after_header = response.headers.get("Retry-After")
            retry_after = (
                int(retry_after_header)
                if retry_after_header and retry_after_header.isdigit()
                else None
            )
            raise RateLimitError(retry_after)
        response.raise_for_status()
        return response

    return await _do_request()


def year_from_date(value: Optional[str]) -> Optional[int]:
    """Extrait l'annee d'une date ISO (YYYY-MM-DD), None si absente ou invalide."""
    if value and len(value) >= 4 and value[:4].isdigit():
        return int(value[:4])
    return None
