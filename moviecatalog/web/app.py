"""
Application FastAPI de MovieCatalog.

Initialise l'application web avec le Container DI, monte les routes et
traduit les erreurs typées du catalogue en réponses HTTP :
- UpstreamTimeoutError -> 504
- ContractViolationError, UpstreamError -> 502
- OperationCancelledError -> 499 (journalisée en INFO, pas en erreur)
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from ..config import Settings
from ..container import Container
from ..core.errors import (
    ContractViolationError,
    OperationCancelledError,
    UpstreamError,
    UpstreamTimeoutError,
)
from ..logging_config import configure_logging
from .routes.movies import router as movies_router

# Code non standard (nginx) : le client a abandonné la requête
CLIENT_CLOSED_REQUEST = 499


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise le Container DI au démarrage et libère ses ressources à l'arrêt."""
    container = Container()
    # Echec immédiat si la clé API TMDB est absente
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )
    container.init_resources()
    app.state.container = container
    logger.info("Démarrage de MovieCatalog", tmdb_base_url=settings.tmdb_base_url)
    try:
        yield
    finally:
        await container.tmdb_client().close()
        container.shutdown_resources()
        logger.info("Arrêt de MovieCatalog")


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": message})


async def _handle_cancelled(request: Request, exc: OperationCancelledError) -> JSONResponse:
    logger.info(f"Requête annulée: {request.url.path}")
    return _error_response(CLIENT_CLOSED_REQUEST, "Requête annulée")


async def _handle_timeout(request: Request, exc: UpstreamTimeoutError) -> JSONResponse:
    logger.error(f"Délai dépassé vers TMDB pour {request.url.path}: {exc}")
    return _error_response(504, "Le fournisseur de films n'a pas répondu à temps")


async def _handle_contract(request: Request, exc: ContractViolationError) -> JSONResponse:
    logger.error(f"Réponse TMDB inexploitable pour {request.url.path}: {exc}")
    return _error_response(502, "Réponse invalide du fournisseur de films")


async def _handle_upstream(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error(f"Erreur TMDB pour {request.url.path}: {exc}")
    return _error_response(502, "Le fournisseur de films est indisponible")


def _cors_origins() -> list[str]:
    """Origines CORS configurées, ou la valeur par défaut si la config est incomplète."""
    try:
        return Settings().cors_allowed_origins
    except ValueError:
        return Settings.model_fields["cors_allowed_origins"].default


app = FastAPI(title="MovieCatalog", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Handlers d'erreurs (résolus selon la hiérarchie de l'exception)
app.add_exception_handler(OperationCancelledError, _handle_cancelled)
app.add_exception_handler(UpstreamTimeoutError, _handle_timeout)
app.add_exception_handler(ContractViolationError, _handle_contract)
app.add_exception_handler(UpstreamError, _handle_upstream)

# Routes
app.include_router(movies_router)


@app.get("/health")
async def health() -> dict[str, str]:
    """Sonde de vivacité."""
    return {"status": "ok"}
