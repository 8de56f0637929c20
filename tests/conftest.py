"""
Fixtures pytest partagees pour les tests MovieCatalog.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test avec chemins temporaires
- Cache reel dans un repertoire temporaire
- Client TMDB dont le backoff n'attend pas
"""

from pathlib import Path
from typing import AsyncIterator, Iterator
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from moviecatalog.adapters.api.cache import APICache
from moviecatalog.adapters.api.genres import GenreLookup
from moviecatalog.adapters.api.tmdb_client import TMDBClient
from moviecatalog.config import Settings
from tests.fixtures.tmdb_responses import TMDB_TEST_URL


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    Utilise tmp_path de pytest pour isoler le cache et les logs
    de chaque test.
    """
    return Settings(
        _env_file=None,
        tmdb_api_key="test_api_key",
        cache_dir=tmp_path / "cache",
        log_file=tmp_path / "test.log",
    )


@pytest.fixture
def cache(tmp_path: Path) -> Iterator[APICache]:
    """Cache reel avec un repertoire temporaire."""
    cache = APICache(cache_dir=str(tmp_path / "test_cache"))
    yield cache
    cache.close()


@pytest.fixture
def genre_lookup(cache: APICache) -> GenreLookup:
    """Table des genres adossee au cache de test."""
    return GenreLookup(cache)


@pytest.fixture
def fake_sleep() -> AsyncMock:
    """Remplace asyncio.sleep dans le backoff: les tests n'attendent jamais."""
    return AsyncMock()


@pytest_asyncio.fixture
async def tmdb_client(fake_sleep: AsyncMock) -> AsyncIterator[TMDBClient]:
    """TMDBClient de test (cle v3, backoff instantane)."""
    client = TMDBClient(api_key="test_api_key", base_url=TMDB_TEST_URL, sleep=fake_sleep)
    yield client
    await client.close()
