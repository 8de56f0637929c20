"""
Schémas de réponse de l'API HTTP.

Les entités du domaine sont converties en modèles pydantic enrichis des URL
complètes des images (poster w500, backdrop original, profils w185).
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel

from ..core.entities import (
    CastMember,
    CrewMember,
    Genre,
    MovieDetail,
    MovieSummary,
    PaginatedResult,
)

POSTER_SIZE = "w500"
BACKDROP_SIZE = "original"
PROFILE_SIZE = "w185"


def full_image_path(image_base_url: str, path: str, size: str) -> str:
    """Construit l'URL complète d'une image TMDB ("" si le chemin est vide)."""
    if not path:
        return ""
    if path.lower().startswith("http"):
        return path
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{image_base_url.rstrip('/')}/{size}{path}"


class GenreOut(BaseModel):
    id: int
    name: str

    @classmethod
    def from_entity(cls, genre: Genre) -> "GenreOut":
        return cls(id=genre.id, name=genre.name)


class CastOut(BaseModel):
    id: int
    name: str
    character: str
    profile_path: str
    full_profile_path: str
    order: int

    @classmethod
    def from_entity(cls, member: CastMember, image_base_url: str) -> "CastOut":
        return cls(
            id=member.id,
            name=member.name,
            character=member.character,
            profile_path=member.profile_path,
            full_profile_path=full_image_path(image_base_url, member.profile_path, PROFILE_SIZE),
            order=member.order,
        )


class CrewOut(BaseModel):
    id: int
    name: str
    job: str
    department: str
    profile_path: str
    full_profile_path: str

    @classmethod
    def from_entity(cls, member: CrewMember, image_base_url: str) -> "CrewOut":
        return cls(
            id=member.id,
            name=member.name,
            job=member.job,
            department=member.department,
            profile_path=member.profile_path,
            full_profile_path=full_image_path(image_base_url, member.profile_path, PROFILE_SIZE),
        )


class MovieOut(BaseModel):
    """Film dans une liste paginée."""

    id: int
    title: str
    overview: str
    poster_path: str
    full_poster_path: str
    vote_average: float
    vote_count: int
    release_date: Optional[date]
    genres: list[GenreOut]

    @classmethod
    def from_entity(cls, movie: MovieSummary, image_base_url: str) -> "MovieOut":
        return cls(
            id=movie.id,
            title=movie.title,
            overview=movie.overview,
            poster_path=movie.poster_path,
            full_poster_path=full_image_path(image_base_url, movie.poster_path, POSTER_SIZE),
            vote_average=movie.vote_average,
            vote_count=movie.vote_count,
            release_date=movie.release_date,
            genres=[GenreOut.from_entity(genre) for genre in movie.genres],
        )


class MovieDetailOut(MovieOut):
    """Film détaillé avec casting et équipe technique."""

    original_title: str
    backdrop_path: str
    full_backdrop_path: str
    status: str
    runtime: Optional[int]
    popularity: float
    original_language: str
    adult: bool
    cast: list[CastOut]
    crew: list[CrewOut]

    @classmethod
    def from_detail(cls, detail: MovieDetail, image_base_url: str) -> "MovieDetailOut":
        movie = detail.summary
        base = MovieOut.from_entity(movie, image_base_url)
        return cls(
            **base.model_dump(),
            original_title=movie.original_title,
            backdrop_path=movie.backdrop_path,
            full_backdrop_path=full_image_path(image_base_url, movie.backdrop_path, BACKDROP_SIZE),
            status=detail.status,
            runtime=detail.runtime,
            popularity=movie.popularity,
            original_language=movie.original_language,
            adult=movie.adult,
            cast=[CastOut.from_entity(member, image_base_url) for member in detail.cast],
            crew=[CrewOut.from_entity(member, image_base_url) for member in detail.crew],
        )


class PaginatedMoviesOut(BaseModel):
    page: int
    total_pages: int
    total_results: int
    results: list[MovieOut]

    @classmethod
    def from_result(
        cls, result: PaginatedResult[MovieSummary], image_base_url: str
    ) -> "PaginatedMoviesOut":
        return cls(
            page=result.page,
            total_pages=result.total_pages,
            total_results=result.total_results,
            results=[MovieOut.from_entity(movie, image_base_url) for movie in result.results],
        )
