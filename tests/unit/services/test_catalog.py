"""
Tests pour CatalogService - orchestration cache / TMDB / mapping.

Utilise un vrai APICache (repertoire temporaire) et respx pour simuler
l'API TMDB. Couvre:
- Protocole cache-first (un seul appel pour deux requetes identiques)
- Expiration du cache et nouvel appel
- Routage recherche textuelle / filtrage parametrique
- Film introuvable, page invalide, annulation
- Resolution des genres et mode degrade
- Aucun echec n'est mis en cache
"""

import asyncio
from unittest.mock import AsyncMock

import httpx
import pytest
import respx

from moviecatalog.adapters.api.cache import APICache
from moviecatalog.adapters.api.genres import GenreLookup
from moviecatalog.adapters.api.tmdb_client import TMDBClient
from moviecatalog.core.entities import Genre, MovieDetail, PaginatedResult
from moviecatalog.core.errors import (
    ContractViolationError,
    OperationCancelledError,
    TransientUpstreamError,
)
from moviecatalog.core.ports.catalog import IMovieCatalog
from moviecatalog.services.catalog import CatalogService, build_search_request
from tests.fixtures.tmdb_responses import (
    TMDB_DISCOVER_RESPONSE,
    TMDB_GENRES_RESPONSE,
    TMDB_MOVIE_DETAILS_RESPONSE,
    TMDB_NOT_FOUND_RESPONSE,
    TMDB_POPULAR_RESPONSE,
    TMDB_SEARCH_RESPONSE,
    TMDB_TEST_URL,
    TMDB_TOP_RATED_RESPONSE,
)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def service(
    tmdb_client: TMDBClient, cache: APICache, genre_lookup: GenreLookup
) -> CatalogService:
    """CatalogService avec un cache reel et un client TMDB mocke par respx."""
    return CatalogService(tmdb_client, cache, genre_lookup, cache_ttl=900)


@pytest.fixture
def genres_route():
    """Route de la liste des genres (a utiliser sous respx.mock)."""
    return respx.get(f"{TMDB_TEST_URL}/genre/movie/list").mock(
        return_value=httpx.Response(200, json=TMDB_GENRES_RESPONSE)
    )


def popular_route(**kwargs):
    return respx.get(f"{TMDB_TEST_URL}/movie/popular").mock(**kwargs)


# ============================================================================
# build_search_request
# ============================================================================


class TestBuildSearchRequest:
    """Tests du choix d'endpoint et des parametres effectifs."""

    def test_text_query_uses_search_endpoint(self) -> None:
        endpoint, params = build_search_request(query="matrix")

        assert endpoint == "/search/movie"
        assert params == {"page": 1, "query": "matrix"}

    @pytest.mark.parametrize("query", [None, "", "   "])
    def test_blank_query_uses_discover_endpoint(self, query) -> None:
        """Une requete absente ou blanche bascule sur le filtrage parametrique."""
        endpoint, params = build_search_request(query=query, year=2020)

        assert endpoint == "/discover/movie"
        assert params == {"page": 1, "primary_release_year": 2020}

    def test_query_is_stripped(self) -> None:
        _, params = build_search_request(query="  matrix  ")
        assert params["query"] == "matrix"

    def test_all_filters_are_forwarded(self) -> None:
        """Chaque filtre renseigne devient un parametre TMDB."""
        _, params = build_search_request(
            year=1999,
            language="en",
            sort_by="vote_average.desc",
            min_rating=7.5,
            genre_id=878,
            page=3,
        )

        assert params == {
            "page": 3,
            "primary_release_year": 1999,
            "with_original_language": "en",
            "sort_by": "vote_average.desc",
            "vote_average.gte": 7.5,
            "with_genres": 878,
        }

    def test_zero_rating_is_forwarded(self) -> None:
        """Une note minimale de 0 est un filtre renseigne."""
        _, params = build_search_request(min_rating=0.0)
        assert params["vote_average.gte"] == 0.0


# ============================================================================
# Listes paginees
# ============================================================================


class TestListOperations:
    """Tests de list_popular / list_top_rated."""

    def test_implements_catalog_port(self, cache: APICache, genre_lookup: GenreLookup) -> None:
        service = CatalogService(TMDBClient(api_key="key"), cache, genre_lookup)
        assert isinstance(service, IMovieCatalog)

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_popular_resolves_genres(
        self, service: CatalogService, genres_route
    ) -> None:
        """Les films retournes portent des noms de genre resolus."""
        popular_route(return_value=httpx.Response(200, json=TMDB_POPULAR_RESPONSE))

        result = await service.list_popular(page=1)

        assert isinstance(result, PaginatedResult)
        assert result.total_pages == 500
        assert result.results[0].genres[0] == Genre(28, "Action")
        assert result.results[1].genres == (Genre(18, "Drama"), Genre(10770, "Unknown"))

    @pytest.mark.asyncio
    @respx.mock
    async def test_same_request_twice_calls_upstream_once(
        self, service: CatalogService, genres_route
    ) -> None:
        """Deux requetes identiques dans le TTL: un seul appel TMDB, meme resultat."""
        route = popular_route(return_value=httpx.Response(200, json=TMDB_POPULAR_RESPONSE))

        first = await service.list_popular(page=1)
        second = await service.list_popular(page=1)

        assert first == second
        assert route.call_count == 1
        assert genres_route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_different_pages_are_cached_separately(
        self, service: CatalogService, genres_route
    ) -> None:
        route = popular_route(return_value=httpx.Response(200, json=TMDB_POPULAR_RESPONSE))

        await service.list_popular(page=1)
        await service.list_popular(page=2)

        assert route.call_count == 2
        assert route.calls.last.request.url.params["page"] == "2"

    @pytest.mark.asyncio
    @respx.mock
    async def test_empty_genre_list_still_caches_page(self, service: CatalogService) -> None:
        """Une liste de genres vide reste un chargement reussi: la page est mise en cache."""
        respx.get(f"{TMDB_TEST_URL}/genre/movie/list").mock(
            return_value=httpx.Response(200, json={"genres": []})
        )
        route = popular_route(return_value=httpx.Response(200, json=TMDB_POPULAR_RESPONSE))

        await service.list_popular(page=1)
        await service.list_popular(page=1)

        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_expired_entry_triggers_new_call(
        self, tmdb_client: TMDBClient, cache: APICache, genre_lookup: GenreLookup, genres_route
    ) -> None:
        """Apres expiration du TTL, la meme requete rappelle TMDB."""
        service = CatalogService(tmdb_client, cache, genre_lookup, cache_ttl=0.05)
        route = popular_route(return_value=httpx.Response(200, json=TMDB_POPULAR_RESPONSE))

        await service.list_popular()
        await asyncio.sleep(0.1)
        await service.list_popular()

        assert route.call_count == 2
        # La liste des genres a son propre TTL (1 jour)
        assert genres_route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_genre_list_shared_between_operations(
        self, service: CatalogService, genres_route
    ) -> None:
        """La liste des genres n'est chargee qu'une fois pour plusieurs listes."""
        popular_route(return_value=httpx.Response(200, json=TMDB_POPULAR_RESPONSE))
        respx.get(f"{TMDB_TEST_URL}/movie/top_rated").mock(
            return_value=httpx.Response(200, json=TMDB_TOP_RATED_RESPONSE)
        )

        await service.list_popular()
        top = await service.list_top_rated()

        assert [genre.name for genre in top.results[0].genres] == ["Drama", "Crime"]
        assert genres_route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_concurrent_identical_requests_agree(
        self, service: CatalogService, genres_route
    ) -> None:
        """Deux requetes concurrentes identiques obtiennent le meme resultat."""
        popular_route(return_value=httpx.Response(200, json=TMDB_POPULAR_RESPONSE))

        first, second = await asyncio.gather(service.list_popular(), service.list_popular())

        assert first == second

    @pytest.mark.parametrize("page", [0, -1])
    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_page_rejected_before_any_call(
        self, service: CatalogService, page: int
    ) -> None:
        """page < 1 leve ValueError sans aucun appel reseau."""
        with pytest.raises(ValueError):
            await service.list_popular(page=page)
        with pytest.raises(ValueError):
            await service.list_top_rated(page=page)
        with pytest.raises(ValueError):
            await service.search(query="matrix", page=page)

        assert not respx.calls


# ============================================================================
# Recherche
# ============================================================================


class TestSearch:
    """Tests de CatalogService.search()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_text_query_hits_search_endpoint(
        self, service: CatalogService, genres_route
    ) -> None:
        route = respx.get(f"{TMDB_TEST_URL}/search/movie").mock(
            return_value=httpx.Response(200, json=TMDB_SEARCH_RESPONSE)
        )

        result = await service.search(query="matrix")

        assert result.results[0].title == "The Matrix"
        assert route.calls.last.request.url.params["query"] == "matrix"

    @pytest.mark.asyncio
    @respx.mock
    async def test_year_only_search_uses_discover(
        self, service: CatalogService, genres_route
    ) -> None:
        """search(year=2020) interroge /discover/movie et resout les genres."""
        route = respx.get(f"{TMDB_TEST_URL}/discover/movie").mock(
            return_value=httpx.Response(200, json=TMDB_DISCOVER_RESPONSE)
        )

        result = await service.search(query="", year=2020)

        params = route.calls.last.request.url.params
        assert params["primary_release_year"] == "2020"
        assert params["page"] == "1"
        assert "query" not in params
        assert len(result.results) == 1
        assert result.results[0].id == 42
        assert result.results[0].title == "X"
        assert result.results[0].genres == (Genre(28, "Action"),)

    @pytest.mark.asyncio
    @respx.mock
    async def test_filter_order_does_not_defeat_cache(
        self, service: CatalogService, genres_route
    ) -> None:
        """Les memes filtres passes dans un autre ordre reutilisent le cache."""
        route = respx.get(f"{TMDB_TEST_URL}/discover/movie").mock(
            return_value=httpx.Response(200, json=TMDB_DISCOVER_RESPONSE)
        )

        await service.search(year=2020, genre_id=28, min_rating=7.0)
        await service.search(min_rating=7.0, genre_id=28, year=2020)

        assert route.call_count == 1


# ============================================================================
# Detail et genres
# ============================================================================


class TestGetDetail:
    """Tests de CatalogService.get_detail()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_detail_with_credits(self, service: CatalogService) -> None:
        route = respx.get(f"{TMDB_TEST_URL}/movie/19995").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_DETAILS_RESPONSE)
        )

        detail = await service.get_detail(19995)

        assert isinstance(detail, MovieDetail)
        assert detail.title == "Avatar"
        assert detail.cast[0].name == "Sam Worthington"
        assert route.calls.last.request.url.params["append_to_response"] == "credits"

    @pytest.mark.asyncio
    @respx.mock
    async def test_detail_is_cached(self, service: CatalogService) -> None:
        route = respx.get(f"{TMDB_TEST_URL}/movie/19995").mock(
            return_value=httpx.Response(200, json=TMDB_MOVIE_DETAILS_RESPONSE)
        )

        first = await service.get_detail(19995)
        second = await service.get_detail(19995)

        assert first == second
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_not_found_returns_none_and_is_not_cached(
        self, service: CatalogService
    ) -> None:
        """Un film inconnu donne None, sans erreur et sans mise en cache."""
        route = respx.get(f"{TMDB_TEST_URL}/movie/99999999").mock(
            return_value=httpx.Response(404, json=TMDB_NOT_FOUND_RESPONSE)
        )

        assert await service.get_detail(99999999) is None
        assert await service.get_detail(99999999) is None
        assert route.call_count == 2


class TestListGenres:
    """Tests de CatalogService.list_genres()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_list_genres_is_cached(
        self, service: CatalogService, genres_route
    ) -> None:
        first = await service.list_genres()
        second = await service.list_genres()

        assert first == second
        assert first[0] == Genre(28, "Action")
        assert len(first) == 6
        assert genres_route.call_count == 1


# ============================================================================
# Echecs, mode degrade et annulation
# ============================================================================


class TestFailures:
    """Aucun echec n'est mis en cache; les genres indisponibles degradent la reponse."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_genre_failure_serves_unknown_names_without_caching(
        self, service: CatalogService
    ) -> None:
        """Si la liste des genres est indisponible, les genres sont 'Unknown'."""
        respx.get(f"{TMDB_TEST_URL}/genre/movie/list").mock(
            return_value=httpx.Response(500)
        )
        route = popular_route(return_value=httpx.Response(200, json=TMDB_POPULAR_RESPONSE))

        result = await service.list_popular()
        await service.list_popular()

        assert {genre.name for genre in result.results[0].genres} == {"Unknown"}
        # Reponse degradee non mise en cache
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_upstream_failure_is_not_cached(
        self, service: CatalogService, genres_route, fake_sleep: AsyncMock
    ) -> None:
        """Un echec persistant remonte; la requete suivante rappelle TMDB."""
        route = popular_route(
            side_effect=[
                httpx.Response(503),
                httpx.Response(503),
                httpx.Response(503),
                httpx.Response(200, json=TMDB_POPULAR_RESPONSE),
            ]
        )

        with pytest.raises(TransientUpstreamError):
            await service.list_popular()
        result = await service.list_popular()

        assert result.total_results == 10000
        assert route.call_count == 4
        assert fake_sleep.await_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_contract_violation_propagates(
        self, service: CatalogService, genres_route
    ) -> None:
        route = popular_route(
            return_value=httpx.Response(200, json={"page": 1, "results": [{"title": "?"}]})
        )

        with pytest.raises(ContractViolationError):
            await service.list_popular()
        with pytest.raises(ContractViolationError):
            await service.list_popular()
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_cancelled_request_propagates_without_call(
        self, service: CatalogService
    ) -> None:
        """Un signal d'annulation leve avant l'appel: OperationCancelledError."""
        route = popular_route(return_value=httpx.Response(200, json=TMDB_POPULAR_RESPONSE))
        event = asyncio.Event()
        event.set()

        with pytest.raises(OperationCancelledError):
            await service.list_popular(cancel_event=event)
        with pytest.raises(OperationCancelledError):
            await service.get_detail(19995, cancel_event=event)

        assert not route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_cached_result_served_even_if_cancelled(
        self, service: CatalogService, genres_route
    ) -> None:
        """Un cache hit ne fait aucun appel: l'annulation n'a rien a interrompre."""
        popular_route(return_value=httpx.Response(200, json=TMDB_POPULAR_RESPONSE))
        expected = await service.list_popular()
        event = asyncio.Event()
        event.set()

        assert await service.list_popular(cancel_event=event) == expected
