"""
Point d'entrée CLI de MovieCatalog.

Initialise le container DI, configure le logging et fournit les commandes CLI
pour interroger le catalogue depuis un terminal ou lancer le serveur web.
"""

import asyncio
import inspect
from contextlib import asynccontextmanager
from functools import wraps
from typing import Annotated, AsyncIterator, Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import Settings
from .container import Container
from .core.entities import MovieSummary, PaginatedResult
from .core.errors import CatalogError
from .core.ports.catalog import IMovieCatalog
from .logging_config import configure_logging

__version__ = "0.1.0"

app = typer.Typer(
    name="moviecatalog",
    help="Catalogue de films adossé à l'API TMDB",
)
console = Console()


def async_command(func):
    """
    Transforme une fonction async en commande sync via asyncio.run().

    Preserve les annotations Typer pour que les options/arguments soient
    correctement interpretes.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        asyncio.run(func(*args, **kwargs))
    wrapper.__signature__ = inspect.signature(func)
    wrapper.__annotations__ = func.__annotations__
    return wrapper


@asynccontextmanager
async def catalog_session() -> AsyncIterator[IMovieCatalog]:
    """Ouvre un container le temps d'une commande et libère ses ressources."""
    container = Container()
    container.init_resources()
    try:
        yield container.catalog_service()
    except CatalogError as e:
        console.print(f"[red]Erreur : {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        await container.tmdb_client().close()
        container.shutdown_resources()


def _render_page(title: str, result: PaginatedResult[MovieSummary]) -> None:
    """Affiche une page de films sous forme de tableau Rich."""
    table = Table(title=f"{title} (page {result.page}/{result.total_pages})")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Titre")
    table.add_column("Année", justify="center")
    table.add_column("Note", justify="right")
    table.add_column("Genres", style="magenta")
    for movie in result.results:
        table.add_row(
            str(movie.id),
            movie.title,
            str(movie.year) if movie.year else "-",
            f"{movie.vote_average:.1f}",
            ", ".join(genre.name for genre in movie.genres),
        )
    console.print(table)
    console.print(f"{result.total_results} résultat(s)")


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = Settings()
    typer.echo(f"API TMDB : {config.tmdb_base_url}")
    typer.echo(f"Images : {config.tmdb_image_base_url}")
    typer.echo(f"Cache : {config.cache_expiration_minutes} min (genres : {config.genre_cache_hours} h)")
    typer.echo(f"Répertoire du cache : {config.cache_dir or 'temporaire'}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"MovieCatalog v{__version__}")


@app.command()
@async_command
async def popular(
    page: Annotated[int, typer.Option(min=1, help="Numéro de page")] = 1,
) -> None:
    """Liste les films populaires."""
    async with catalog_session() as catalog:
        _render_page("Films populaires", await catalog.list_popular(page=page))


@app.command(name="top-rated")
@async_command
async def top_rated(
    page: Annotated[int, typer.Option(min=1, help="Numéro de page")] = 1,
) -> None:
    """Liste les films les mieux notés."""
    async with catalog_session() as catalog:
        _render_page("Films les mieux notés", await catalog.list_top_rated(page=page))


@app.command()
@async_command
async def search(
    query: Annotated[Optional[str], typer.Argument(help="Texte recherché")] = None,
    year: Annotated[Optional[int], typer.Option(help="Année de sortie")] = None,
    language: Annotated[Optional[str], typer.Option(help="Langue originale (ISO 639-1)")] = None,
    sort_by: Annotated[Optional[str], typer.Option(help="Tri TMDB (ex: popularity.desc)")] = None,
    min_rating: Annotated[Optional[float], typer.Option(min=0, max=10, help="Note minimale")] = None,
    genre: Annotated[Optional[int], typer.Option(help="ID de genre TMDB")] = None,
    page: Annotated[int, typer.Option(min=1, help="Numéro de page")] = 1,
) -> None:
    """Recherche des films par titre, ou les filtre sans titre."""
    async with catalog_session() as catalog:
        result = await catalog.search(
            query=query,
            year=year,
            language=language,
            sort_by=sort_by,
            min_rating=min_rating,
            genre_id=genre,
            page=page,
        )
        _render_page(f"Recherche : {query}" if query else "Découverte", result)


@app.command()
@async_command
async def movie(
    movie_id: Annotated[int, typer.Argument(min=1, help="ID TMDB du film")],
) -> None:
    """Affiche le détail d'un film."""
    async with catalog_session() as catalog:
        detail = await catalog.get_detail(movie_id)
    if detail is None:
        console.print(f"[yellow]Film {movie_id} introuvable[/yellow]")
        raise typer.Exit(code=1)

    summary = detail.summary
    console.print(f"[bold]{summary.title}[/bold] ({summary.year or '?'})")
    if summary.original_title and summary.original_title != summary.title:
        console.print(f"Titre original : {summary.original_title}")
    console.print(f"Statut : {detail.status or '-'} | Durée : {detail.runtime or '?'} min")
    console.print(f"Note : {summary.vote_average:.1f} ({summary.vote_count} votes)")
    console.print(f"Genres : {', '.join(genre.name for genre in summary.genres)}")
    directors = ", ".join(member.name for member in detail.directors)
    if directors:
        console.print(f"Réalisation : {directors}")
    if detail.cast:
        console.print("Avec : " + ", ".join(actor.name for actor in detail.cast[:5]))
    if summary.overview:
        console.print(f"\n{summary.overview}")


@app.command()
@async_command
async def genres() -> None:
    """Liste les genres de films."""
    async with catalog_session() as catalog:
        result = await catalog.list_genres()
    table = Table(title="Genres")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Nom")
    for genre in result:
        table.add_row(str(genre.id), genre.name)
    console.print(table)


@app.command()
def serve(
    host: Annotated[str, typer.Option(help="Adresse d'écoute")] = "0.0.0.0",
    port: Annotated[int, typer.Option(help="Port d'écoute")] = 8000,
    reload: Annotated[bool, typer.Option(help="Rechargement automatique")] = False,
) -> None:
    """Lance le serveur web MovieCatalog."""
    import uvicorn

    typer.echo(f"Démarrage du serveur sur {host}:{port}")
    uvicorn.run("moviecatalog.web.app:app", host=host, port=port, reload=reload)


def main() -> None:
    """Point d'entrée de l'application."""
    # Charge la configuration (échoue sans clé API) et configure le logging
    settings = Settings()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )

    logger.info("Démarrage de MovieCatalog", version=__version__)

    # Lance la CLI
    app()


if __name__ == "__main__":
    main()
