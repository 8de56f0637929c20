"""
Transport HTTP vers l'API TMDB v3.

Ne connait ni le cache ni le modele du domaine: TMDBClient envoie une
requete GET a travers la couche de resilience et retourne le JSON decode.
L'orchestration (cache, mapping) est faite par CatalogService.

Usage:
    client = TMDBClient(api_key="your_key")
    data = await client.get_json("/movie/popular", params={"page": 1})
    await client.close()
"""

import asyncio
from typing import Any, Awaitable, Callable, Mapping, Optional

import httpx
from loguru import logger

from moviecatalog.adapters.api.resilience import (
    MAX_ATTEMPTS,
    RESILIENCE_TIMEOUT,
    request_with_resilience,
)
from moviecatalog.core.errors import ContractViolationError


class TMDBClient:
    """
    Client HTTP bas niveau pour l'API TMDB.

    Chaque appel passe par request_with_resilience:
    - Retry automatique (3 tentatives) sur erreurs reseau, 5xx et 429
    - Timeout de 10s par tentative, en plus du timeout transport de 30s
    - Annulation cooperative via asyncio.Event

    Attributes:
        TMDB_BASE_URL: URL de base de l'API TMDB v3
        TRANSPORT_TIMEOUT: Timeout du client httpx en secondes

    Example:
        client = TMDBClient(api_key="xxx")
        data = await client.get_json("/search/movie", params={"query": "Inception"})
        await client.close()
    """

    TMDB_BASE_URL = "https://api.themoviedb.org/3"
    TRANSPORT_TIMEOUT = 30.0

    def __init__(
        self,
        api_key: str,
        base_url: str = TMDB_BASE_URL,
        max_attempts: int = MAX_ATTEMPTS,
        timeout: float = RESILIENCE_TIMEOUT,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialise le client TMDB.

        Args:
            api_key: Cle API TMDB (v3) ou Read Access Token (v4)
            base_url: URL de base de l'API
            max_attempts: Nombre maximum de tentatives par appel
            timeout: Delai maximum par tentative en secondes
            sleep: Coroutine d'attente du backoff (remplacable dans les tests)
        """
        self._api_key = api_key
        self._base_url = base_url
        self._max_attempts = max_attempts
        self._timeout = timeout
        self._sleep = sleep
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, le cree si necessaire (lazy init).

        Supporte les deux modes d'authentification TMDB:
        - API Key v3 (32 caracteres hex) : passe en parametre api_key
        - Read Access Token v4 (long JWT) : passe en header Bearer

        Returns:
            httpx.AsyncClient configure pour l'API TMDB
        """
        if self._client is None or self._client.is_closed:
            # Detecter le type de cle : v3 (32 hex) vs v4 (long JWT)
            is_v4_token = len(self._api_key) > 40

            # httpx decompresse gzip/deflate automatiquement
            headers = {
                "Accept": "application/json",
                "Accept-Encoding": "gzip, deflate",
            }
            params = {}

            if is_v4_token:
                headers["Authorization"] = f"Bearer {self._api_key}"
            else:
                params["api_key"] = self._api_key

            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                params=params,
                timeout=self.TRANSPORT_TIMEOUT,
            )
        return self._client

    async def get_json(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> dict[str, Any]:
        """
        Execute un GET sur l'API et retourne le corps JSON.

        Args:
            path: Chemin relatif a l'URL de base (ex: "/movie/popular")
            params: Parametres de requete (les None sont ignores)
            cancel_event: Signal d'annulation optionnel

        Returns:
            Corps de la reponse decode

        Raises:
            ContractViolationError: Si le corps n'est pas un objet JSON
            UpstreamError: Voir request_with_resilience
            OperationCancelledError: Si cancel_event est leve
        """
        query = {name: value for name, value in (params or {}).items() if value is not None}
        logger.debug(f"GET TMDB {path} {query}")

        response = await request_with_resilience(
            self._get_client(),
            "GET",
            path,
            max_attempts=self._max_attempts,
            timeout=self._timeout,
            sleep=self._sleep,
            cancel_event=cancel_event,
            params=query,
        )

        try:
            data = response.json()
        except ValueError as exc:
            raise ContractViolationError(f"JSON invalide pour {path}") from exc
        if not isinstance(data, dict):
            raise ContractViolationError(f"Objet JSON attendu pour {path}")
        return data

    async def close(self) -> None:
        """
        Ferme le client HTTP.

        Doit etre appele a la fin de l'utilisation pour liberer
        les ressources reseau.
        """
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
