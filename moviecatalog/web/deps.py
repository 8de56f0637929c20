"""
Dépendances partagées de l'application web.

Fournit le catalogue et la configuration depuis le Container DI attaché à
l'application par le lifespan. Les tests les remplacent via
app.dependency_overrides.
"""

from fastapi import Request

from ..config import Settings
from ..core.ports.catalog import IMovieCatalog


def get_catalog(request: Request) -> IMovieCatalog:
    """Retourne le service catalogue du Container DI."""
    return request.app.state.container.catalog_service()


def get_settings(request: Request) -> Settings:
    """Retourne la configuration chargée au démarrage."""
    return request.app.state.container.config()
