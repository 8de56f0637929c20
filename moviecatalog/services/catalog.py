"""
Service d'orchestration du catalogue de films.

Chaque operation suit le meme protocole:
1. Calcul de la cle de cache (endpoint + parametres effectifs normalises)
2. Cache hit: retour immediat, sans appel reseau ni re-mapping
3. Cache miss: appel TMDB a travers la couche de resilience
4. Succes: mapping (avec resolution des genres si la reponse ne porte que
   des IDs), ecriture dans le cache, retour
5. Echec ou annulation: propagation telle quelle, rien n'est mis en cache

Les relances sont entierement gerees par la couche de resilience: ce
service ne prend aucune decision de retry.
"""

import asyncio
from typing import Any, Mapping, Optional

from loguru import logger

from moviecatalog.adapters.api.cache import APICache, make_cache_key
from moviecatalog.adapters.api.genres import GenreLookup
from moviecatalog.adapters.api.tmdb_client import TMDBClient
from moviecatalog.adapters.api.tmdb_mapper import map_detail, map_genres, map_movie_page
from moviecatalog.core.entities import Genre, MovieDetail, MovieSummary, PaginatedResult
from moviecatalog.core.errors import (
    CatalogError,
    OperationCancelledError,
    ResourceNotFoundError,
    UpstreamError,
)
from moviecatalog.core.ports.catalog import IMovieCatalog

POPULAR_ENDPOINT = "/movie/popular"
TOP_RATED_ENDPOINT = "/movie/top_rated"
SEARCH_ENDPOINT = "/search/movie"
DISCOVER_ENDPOINT = "/discover/movie"
GENRES_ENDPOINT = "/genre/movie/list"


def build_search_request(
    query: Optional[str] = None,
    year: Optional[int] = None,
    language: Optional[str] = None,
    sort_by: Optional[str] = None,
    min_rating: Optional[float] = None,
    genre_id: Optional[int] = None,
    page: int = 1,
) -> tuple[str, dict[str, Any]]:
    """
    Choisit l'endpoint de recherche et construit les parametres effectifs.

    Recherche textuelle (/search/movie) si query contient autre chose que des
    espaces, sinon filtrage parametrique (/discover/movie). Seuls les filtres
    renseignes sont transmis; page est toujours present.

    Returns:
        Tuple (endpoint, parametres)

    Example:
        >>> build_search_request(query="", year=2020)
        ('/discover/movie', {'page': 1, 'primary_release_year': 2020})
    """
    text = query.strip() if query else ""
    params: dict[str, Any] = {"page": page}
    if text:
        params["query"] = text
    if year is not None:
        params["primary_release_year"] = year
    if language:
        params["with_original_language"] = language
    if sort_by:
        params["sort_by"] = sort_by
    if min_rating is not None:
        params["vote_average.gte"] = min_rating
    if genre_id is not None:
        params["with_genres"] = genre_id
    return (SEARCH_ENDPOINT if text else DISCOVER_ENDPOINT), params


def _check_page(page: int) -> None:
    if page < 1:
        raise ValueError(f"Numero de page invalide: {page} (doit etre >= 1)")


class CatalogService(IMovieCatalog):
    """
    Implementation de IMovieCatalog adossee a TMDB.

    Le cache et la table des genres sont des composants injectes (voir
    container.py), crees une fois au demarrage et fermes a l'arret.

    Example:
        service = CatalogService(client, cache, GenreLookup(cache), cache_ttl=900)
        page = await service.list_popular(page=1)
        detail = await service.get_detail(550)
    """

    def __init__(
        self,
        client: TMDBClient,
        cache: APICache,
        genre_lookup: GenreLookup,
        cache_ttl: Optional[float] = None,
    ) -> None:
        """
        Args:
            client: Transport HTTP vers TMDB
            cache: Cache des reponses
            genre_lookup: Table des genres (partage le meme cache)
            cache_ttl: TTL des reponses en secondes (defaut: celui du cache)
        """
        self._client = client
        self._cache = cache
        self._genres = genre_lookup
        self._cache_ttl = cache_ttl

    async def list_popular(
        self,
        page: int = 1,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PaginatedResult[MovieSummary]:
        _check_page(page)
        return await self._fetch_movie_page(
            "films populaires", POPULAR_ENDPOINT, {"page": page}, cancel_event
        )

    async def list_top_rated(
        self,
        page: int = 1,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PaginatedResult[MovieSummary]:
        _check_page(page)
        return await self._fetch_movie_page(
            "films les mieux notes", TOP_RATED_ENDPOINT, {"page": page}, cancel_event
        )

    async def search(
        self,
        query: Optional[str] = None,
        year: Optional[int] = None,
        language: Optional[str] = None,
        sort_by: Optional[str] = None,
        min_rating: Optional[float] = None,
        genre_id: Optional[int] = None,
        page: int = 1,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PaginatedResult[MovieSummary]:
        _check_page(page)
        endpoint, params = build_search_request(
            query=query,
            year=year,
            language=language,
            sort_by=sort_by,
            min_rating=min_rating,
            genre_id=genre_id,
            page=page,
        )
        return await self._fetch_movie_page("recherche", endpoint, params, cancel_event)

    async def get_detail(
        self,
        movie_id: int,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Optional[MovieDetail]:
        path = f"/movie/{movie_id}"
        params = {"append_to_response": "credits"}
        cache_key = make_cache_key(path, params)

        cached = await self._cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit pour le film {movie_id}")
            return cached

        label = f"details du film {movie_id}"
        try:
            data = await self._client.get_json(path, params, cancel_event=cancel_event)
            detail = map_detail(data)
        except ResourceNotFoundError:
            logger.warning(f"Film {movie_id} introuvable sur TMDB")
            return None
        except (OperationCancelledError, asyncio.CancelledError):
            logger.info(f"Requete annulee: {label}")
            raise
        except CatalogError as e:
            logger.error(f"Echec de la recuperation ({label}): {e}")
            raise

        await self._cache.set(cache_key, detail, self._cache_ttl)
        return detail

    async def list_genres(
        self,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> list[Genre]:
        cached = await self._genres.get()
        if cached is not None:
            logger.debug("Cache hit pour la liste des genres")
            return list(cached)

        try:
            data = await self._client.get_json(GENRES_ENDPOINT, cancel_event=cancel_event)
            genres = map_genres(data)
        except (OperationCancelledError, asyncio.CancelledError):
            logger.info("Requete annulee: liste des genres")
            raise
        except CatalogError as e:
            logger.error(f"Echec de la recuperation des genres: {e}")
            raise

        await self._genres.set(genres)
        return list(genres)

    async def _fetch_movie_page(
        self,
        label: str,
        endpoint: str,
        params: Mapping[str, Any],
        cancel_event: Optional[asyncio.Event],
    ) -> PaginatedResult[MovieSummary]:
        """Protocole cache-first commun aux operations paginees."""
        cache_key = make_cache_key(endpoint, params)

        # CACHE-FIRST: Check cache before API call
        cached = await self._cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit ({label}): {cache_key}")
            return cached

        try:
            data = await self._client.get_json(endpoint, params, cancel_event=cancel_event)
            genres_resolved = await self._warm_genres(cancel_event)
            result = map_movie_page(data, self._genres.table)
        except (OperationCancelledError, asyncio.CancelledError):
            logger.info(f"Requete annulee: {label}")
            raise
        except CatalogError as e:
            logger.error(f"Echec de la recuperation ({label}): {e}")
            raise

        # Genres en "Unknown": reponse degradee, servie mais pas mise en cache
        if genres_resolved:
            await self._cache.set(cache_key, result, self._cache_ttl)
        return result

    async def _warm_genres(self, cancel_event: Optional[asyncio.Event]) -> bool:
        """
        S'assure que la table des genres est chargee avant un mapping.

        Un echec reseau n'interrompt pas la requete en cours: les IDs non
        resolus prendront le nom "Unknown".

        Returns:
            True si la table des genres est chargee
        """
        try:
            await self.list_genres(cancel_event=cancel_event)
        except UpstreamError as e:
            logger.warning(f"Genres indisponibles, resolution en 'Unknown': {e}")
        return self._genres.is_warm
