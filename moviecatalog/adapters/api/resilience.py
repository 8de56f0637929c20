"""
Politiques de resilience autour des appels a l'API TMDB.

Trois couches composees dans un ordre fixe, de l'exterieur vers l'interieur:

1. Annulation (run_cancellable): un asyncio.Event optionnel interrompt
   l'appel en cours, backoff compris, et leve OperationCancelledError.
2. Retry (with_retry): jusqu'a 3 tentatives sur erreur transitoire
   (reseau, 5xx, 408) ou rate limiting (429), avec backoff exponentiel
   2^tentative secondes (2s, 4s).
3. Timeout (with_timeout): plafond fixe de 10s par tentative, independant
   du timeout du transport httpx (30s).

Usage:
    # Avec les decorateurs
    @with_retry(max_attempts=3)
    @with_timeout(10.0)
    async def my_api_call():
        ...

    # Avec la fonction helper
    response = await request_with_resilience(client, "GET", url)
"""

import asyncio
import contextlib
from functools import wraps
from typing import Any, Awaitable, Callable, Coroutine, Optional, TypeVar

import httpx
from loguru import logger
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from moviecatalog.core.errors import (
    ContractViolationError,
    OperationCancelledError,
    RateLimitError,
    ResourceNotFoundError,
    TransientUpstreamError,
    UpstreamError,
    UpstreamTimeoutError,
)

T = TypeVar("T")

# Politique fixe (non configurable)
MAX_ATTEMPTS = 3
BACKOFF_MULTIPLIER = 2
RESILIENCE_TIMEOUT = 10.0


def with_retry(
    max_attempts: int = MAX_ATTEMPTS,
    backoff_multiplier: float = BACKOFF_MULTIPLIER,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
):
    """
    Decorateur pour relancer sur TransientUpstreamError avec backoff exponentiel.

    L'attente avant la tentative n+1 vaut backoff_multiplier * 2^(n-1),
    soit 2s puis 4s avec les valeurs par defaut. Une fois les tentatives
    epuisees, la derniere erreur est relancee telle quelle.

    Args:
        max_attempts: Nombre maximum de tentatives, premier appel compris (defaut: 3)
        backoff_multiplier: Delai de la premiere attente en secondes (defaut: 2)
        sleep: Coroutine d'attente (remplacable dans les tests)

    Returns:
        Decorateur a appliquer sur une fonction async

    Example:
        @with_retry(max_attempts=3)
        async def fetch_data():
            # Sera relance jusqu'a 3 fois si TransientUpstreamError est levee
            ...
    """

    def log_retry(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        delay = retry_state.next_action.sleep if retry_state.next_action else 0
        if isinstance(error, RateLimitError) and error.retry_after is not None:
            logger.warning(
                f"Rate limit TMDB (Retry-After: {error.retry_after}s), "
                f"nouvelle tentative {retry_state.attempt_number + 1}/{max_attempts} "
                f"dans {delay:g}s"
            )
        else:
            logger.warning(
                f"Erreur transitoire ({error}), "
                f"nouvelle tentative {retry_state.attempt_number + 1}/{max_attempts} "
                f"dans {delay:g}s"
            )

    return retry(
        retry=retry_if_exception_type(TransientUpstreamError),
        wait=wait_exponential(multiplier=backoff_multiplier, exp_base=2),
        stop=stop_after_attempt(max_attempts),
        before_sleep=log_retry,
        sleep=sleep,
        reraise=True,
    )


def with_timeout(seconds: float = RESILIENCE_TIMEOUT):
    """
    Decorateur imposant un delai maximum a chaque appel de la fonction.

    Args:
        seconds: Delai maximum en secondes (defaut: 10)

    Returns:
        Decorateur a appliquer sur une fonction async

    Raises:
        UpstreamTimeoutError: Si l'appel depasse le delai
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await asyncio.wait_for(func(*args, **kwargs), timeout=seconds)
            except asyncio.TimeoutError as exc:
                raise UpstreamTimeoutError(seconds) from exc

        return wrapper

    return decorator


async def run_cancellable(
    coro: Coroutine[Any, Any, T],
    cancel_event: Optional[asyncio.Event] = None,
) -> T:
    """
    Execute une coroutine en l'interrompant si cancel_event est leve.

    Args:
        coro: Coroutine a executer
        cancel_event: Signal d'annulation optionnel

    Returns:
        Le resultat de la coroutine

    Raises:
        OperationCancelledError: Si le signal est leve avant la fin de l'appel
    """
    if cancel_event is None:
        return await coro
    if cancel_event.is_set():
        coro.close()
        raise OperationCancelledError()

    task = asyncio.ensure_future(coro)
    waiter = asyncio.ensure_future(cancel_event.wait())
    try:
        done, _ = await asyncio.wait(
            {task, waiter}, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        task.cancel()
        waiter.cancel()
        await asyncio.gather(task, waiter, return_exceptions=True)
        raise

    if task in done:
        waiter.cancel()
        return task.result()

    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task
    raise OperationCancelledError()


def raise_for_upstream_status(response: httpx.Response) -> None:
    """
    Traduit un statut HTTP d'erreur en erreur typee du catalogue.

    Args:
        response: Reponse httpx a verifier

    Raises:
        RateLimitError: 429
        ResourceNotFoundError: 404
        TransientUpstreamError: 408 et 5xx
        UpstreamError: Autres 4xx
    """
    status = response.status_code
    if status < 400:
        return
    if status == 429:
        raise RateLimitError(_parse_retry_after(response.headers.get("Retry-After")))
    if status == 404:
        raise ResourceNotFoundError()
    if status == 408 or status >= 500:
        raise TransientUpstreamError(f"HTTP {status}", status_code=status)
    raise UpstreamError(f"HTTP {status}", status_code=status)


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    """Retry-After en secondes; None si absent ou au format date HTTP."""
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


async def request_with_resilience(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = MAX_ATTEMPTS,
    timeout: float = RESILIENCE_TIMEOUT,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    cancel_event: Optional[asyncio.Event] = None,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP avec annulation, retry et timeout.

    Les erreurs de transport httpx et les statuts d'erreur sont convertis
    en erreurs typees; seules les erreurs transitoires sont relancees.

    Args:
        client: Client httpx async a utiliser
        method: Methode HTTP (GET, POST, etc.)
        url: URL a appeler
        max_attempts: Nombre maximum de tentatives (defaut: 3)
        timeout: Delai maximum par tentative en secondes (defaut: 10)
        sleep: Coroutine d'attente du backoff
        cancel_event: Signal d'annulation optionnel
        **kwargs: Arguments supplementaires passes a client.request()

    Returns:
        httpx.Response en cas de succes

    Raises:
        TransientUpstreamError: Si l'erreur persiste apres epuisement des tentatives
        UpstreamTimeoutError: Si une tentative depasse le delai
        ResourceNotFoundError: Sur 404
        ContractViolationError: Si le corps compresse est illisible
        UpstreamError: Pour les autres erreurs HTTP ou de requete (redirections)
        OperationCancelledError: Si cancel_event est leve

    Example:
        async with httpx.AsyncClient() as client:
            response = await request_with_resilience(
                client, "GET", "https://api.themoviedb.org/3/movie/550",
                params={"api_key": key},
            )
    """

    @with_retry(max_attempts=max_attempts, sleep=sleep)
    @with_timeout(timeout)
    async def _do_request() -> httpx.Response:
        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(client.timeout.read) from exc
        except httpx.TransportError as exc:
            raise TransientUpstreamError(f"Erreur reseau: {exc!r}") from exc
        except httpx.DecodingError as exc:
            raise ContractViolationError(f"Corps de reponse illisible: {exc!r}") from exc
        except httpx.RequestError as exc:
            raise UpstreamError(f"Requete impossible: {exc!r}") from exc
        raise_for_upstream_status(response)
        return response

    return await run_cancellable(_do_request(), cancel_event)
