"""
Routes du catalogue de films.

Valide les paramètres de requête (page >= 1, note entre 0 et 10) avant
d'appeler le catalogue, puis façonne les réponses avec les schémas de
web/schemas.py. Les erreurs du catalogue sont traduites par les handlers
enregistrés dans web/app.py.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query

from ...config import Settings
from ...core.ports.catalog import IMovieCatalog
from ..deps import get_catalog, get_settings
from ..schemas import GenreOut, MovieDetailOut, PaginatedMoviesOut

router = APIRouter(prefix="/api/movies", tags=["movies"])

PageParam = Annotated[int, Query(ge=1, description="Numéro de page (commence à 1)")]
CatalogDep = Annotated[IMovieCatalog, Depends(get_catalog)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


@router.get("/popular", response_model=PaginatedMoviesOut)
async def popular_movies(
    catalog: CatalogDep, settings: SettingsDep, page: PageParam = 1
) -> PaginatedMoviesOut:
    """Films populaires, paginés."""
    result = await catalog.list_popular(page=page)
    return PaginatedMoviesOut.from_result(result, settings.tmdb_image_base_url)


@router.get("/top-rated", response_model=PaginatedMoviesOut)
async def top_rated_movies(
    catalog: CatalogDep, settings: SettingsDep, page: PageParam = 1
) -> PaginatedMoviesOut:
    """Films les mieux notés, paginés."""
    result = await catalog.list_top_rated(page=page)
    return PaginatedMoviesOut.from_result(result, settings.tmdb_image_base_url)


@router.get("/search", response_model=PaginatedMoviesOut)
async def search_movies(
    catalog: CatalogDep,
    settings: SettingsDep,
    query: Optional[str] = None,
    year: Optional[int] = None,
    language: Optional[str] = None,
    sort_by: Optional[str] = None,
    vote_average_gte: Annotated[Optional[float], Query(ge=0, le=10)] = None,
    with_genres: Optional[int] = None,
    page: PageParam = 1,
) -> PaginatedMoviesOut:
    """Recherche textuelle (query) ou filtrage paramétrique (sans query)."""
    result = await catalog.search(
        query=query,
        year=year,
        language=language,
        sort_by=sort_by,
        min_rating=vote_average_gte,
        genre_id=with_genres,
        page=page,
    )
    return PaginatedMoviesOut.from_result(result, settings.tmdb_image_base_url)


@router.get("/genres", response_model=list[GenreOut])
async def movie_genres(catalog: CatalogDep) -> list[GenreOut]:
    """Liste complète des genres de films."""
    genres = await catalog.list_genres()
    return [GenreOut.from_entity(genre) for genre in genres]


@router.get("/{movie_id}", response_model=MovieDetailOut)
async def movie_detail(
    catalog: CatalogDep,
    settings: SettingsDep,
    movie_id: Annotated[int, Path(ge=1)],
) -> MovieDetailOut:
    """Détail d'un film avec casting et équipe technique."""
    detail = await catalog.get_detail(movie_id)
    if detail is None:
        raise HTTPException(status_code=404, detail=f"Film {movie_id} introuvable")
    return MovieDetailOut.from_detail(detail, settings.tmdb_image_base_url)
