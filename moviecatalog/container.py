"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour les interfaces CLI et Web.
Le cache est une Resource: cree une seule fois au demarrage, ferme (et son
repertoire temporaire supprime) par container.shutdown_resources().
"""

from pathlib import Path
from typing import Iterator, Optional

from dependency_injector import containers, providers

from .adapters.api.cache import APICache
from .adapters.api.genres import GenreLookup
from .adapters.api.tmdb_client import TMDBClient
from .config import Settings
from .services.catalog import CatalogService


def init_api_cache(cache_dir: Optional[Path], default_ttl: float) -> Iterator[APICache]:
    """Cycle de vie du cache: creation au demarrage, fermeture a l'arret."""
    cache = APICache(
        cache_dir=str(cache_dir) if cache_dir is not None else None,
        default_ttl=default_ttl,
    )
    try:
        yield cache
    finally:
        cache.close()


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.init_resources()
        catalog = container.catalog_service()
        ...
        await container.tmdb_client().close()
        container.shutdown_resources()
    """

    # Configuration - singleton charge une seule fois
    # (echoue au premier appel si MOVIECATALOG_TMDB_API_KEY est absente)
    config = providers.Singleton(Settings)

    # Cache API - Resource partagee par le service et la table des genres
    api_cache = providers.Resource(
        init_api_cache,
        cache_dir=config.provided.cache_dir,
        default_ttl=config.provided.cache_ttl_seconds,
    )

    genre_lookup = providers.Singleton(
        GenreLookup,
        cache=api_cache,
        ttl=config.provided.genre_cache_ttl_seconds,
    )

    # Client API - Singleton avec api_key depuis config
    tmdb_client = providers.Singleton(
        TMDBClient,
        api_key=config.provided.tmdb_api_key,
        base_url=config.provided.tmdb_base_url,
    )

    catalog_service = providers.Singleton(
        CatalogService,
        client=tmdb_client,
        cache=api_cache,
        genre_lookup=genre_lookup,
        cache_ttl=config.provided.cache_ttl_seconds,
    )
