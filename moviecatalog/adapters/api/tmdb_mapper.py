"""
Conversion des reponses JSON TMDB vers les entites du catalogue.

Fonctions pures: aucun effet de bord, aucun acces reseau. Les champs
optionnels absents ou null deviennent des valeurs vides explicites ("" ou 0)
pour que les appelants n'aient jamais a distinguer "absent" de "vide".

Les listes (popular, top_rated, search, discover) ne portent que des IDs de
genre, resolus via la table fournie par l'appelant. Le detail d'un film
embarque directement les objets genre et les credits.

Toute charge utile impossible a interpreter leve ContractViolationError.
"""

from datetime import date, datetime
from typing import Any, Callable, Mapping, Optional, TypeVar

from moviecatalog.adapters.api.genres import UNKNOWN_GENRE_NAME
from moviecatalog.core.entities import (
    CastMember,
    CrewMember,
    Genre,
    MovieDetail,
    MovieSummary,
    PaginatedResult,
)
from moviecatalog.core.errors import ContractViolationError

T = TypeVar("T")


def parse_release_date(value: Optional[str]) -> Optional[date]:
    """
    Parse une date de sortie TMDB (format YYYY-MM-DD).

    Args:
        value: Chaine de date, eventuellement vide ou null

    Returns:
        date, ou None si la chaine est vide ou non parsable
    """
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def map_summary(item: Mapping[str, Any], genre_table: Mapping[int, str]) -> MovieSummary:
    """
    Convertit un film d'une liste TMDB en MovieSummary.

    Args:
        item: Element de "results" d'une reponse paginee
        genre_table: Table id -> nom des genres (peut etre vide)

    Returns:
        MovieSummary avec les genres resolus ("Unknown" si ID inconnu)

    Raises:
        ContractViolationError: Si l'element n'est pas interpretable
    """
    return _guarded(lambda: _build_summary(item, _genres_from_ids(item, genre_table)))


def map_detail(data: Mapping[str, Any]) -> MovieDetail:
    """
    Convertit la reponse de /movie/{id}?append_to_response=credits en MovieDetail.

    Les genres sont lus depuis les objets embarques; un bloc credits absent
    donne un casting et une equipe vides.

    Raises:
        ContractViolationError: Si la reponse n'est pas interpretable
    """
    return _guarded(lambda: _build_detail(data))


def map_movie_page(
    data: Mapping[str, Any], genre_table: Mapping[int, str]
) -> PaginatedResult[MovieSummary]:
    """
    Convertit une reponse paginee TMDB en PaginatedResult.

    Args:
        data: Reponse JSON ({page, total_pages, total_results, results})
        genre_table: Table id -> nom des genres

    Raises:
        ContractViolationError: Si la reponse n'est pas interpretable
    """

    def build() -> PaginatedResult[MovieSummary]:
        results = data.get("results") or []
        return PaginatedResult(
            page=int(data.get("page") or 1),
            total_pages=int(data.get("total_pages") or 0),
            total_results=int(data.get("total_results") or 0),
            results=tuple(
                _build_summary(item, _genres_from_ids(item, genre_table))
                for item in results
            ),
        )

    return _guarded(build)


def map_genres(data: Mapping[str, Any]) -> tuple[Genre, ...]:
    """
    Convertit la reponse de /genre/movie/list en tuple de Genre.

    Raises:
        ContractViolationError: Si la cle "genres" est absente ou invalide
    """

    def build() -> tuple[Genre, ...]:
        genres = data["genres"]
        if not isinstance(genres, list):
            raise TypeError("genres doit etre une liste")
        return tuple(_build_genre(genre) for genre in genres)

    return _guarded(build)


def _guarded(build: Callable[[], T]) -> T:
    """Execute un mapping en traduisant les erreurs de forme en ContractViolationError."""
    try:
        return build()
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ContractViolationError(f"Reponse TMDB invalide: {exc!r}") from exc


def _build_summary(item: Mapping[str, Any], genres: tuple[Genre, ...]) -> MovieSummary:
    """Champs communs aux listes et au detail."""
    return MovieSummary(
        id=int(item["id"]),
        title=item.get("title") or item.get("original_title") or "",
        original_title=item.get("original_title") or "",
        overview=item.get("overview") or "",
        poster_path=item.get("poster_path") or "",
        backdrop_path=item.get("backdrop_path") or "",
        vote_average=float(item.get("vote_average") or 0.0),
        vote_count=int(item.get("vote_count") or 0),
        release_date=parse_release_date(item.get("release_date")),
        genres=genres,
        popularity=float(item.get("popularity") or 0.0),
        original_language=item.get("original_language") or "",
        adult=bool(item.get("adult", False)),
    )


def _genres_from_ids(
    item: Mapping[str, Any], genre_table: Mapping[int, str]
) -> tuple[Genre, ...]:
    return tuple(
        Genre(id=int(genre_id), name=genre_table.get(int(genre_id), UNKNOWN_GENRE_NAME))
        for genre_id in item.get("genre_ids") or []
    )


def _build_genre(genre: Mapping[str, Any]) -> Genre:
    return Genre(id=int(genre["id"]), name=genre.get("name") or UNKNOWN_GENRE_NAME)


def _build_detail(data: Mapping[str, Any]) -> MovieDetail:
    genres = tuple(_build_genre(genre) for genre in data.get("genres") or [])
    credits_data = data.get("credits") or {}

    cast = sorted(
        (
            CastMember(
                id=int(actor["id"]),
                name=actor.get("name") or "",
                character=actor.get("character") or "",
                profile_path=actor.get("profile_path") or "",
                order=int(actor.get("order") or 0),
            )
            for actor in credits_data.get("cast") or []
        ),
        key=lambda member: member.order,
    )
    crew = tuple(
        CrewMember(
            id=int(member["id"]),
            name=member.get("name") or "",
            job=member.get("job") or "",
            department=member.get("department") or "",
            profile_path=member.get("profile_path") or "",
        )
        for member in credits_data.get("crew") or []
    )

    runtime = data.get("runtime")
    return MovieDetail(
        summary=_build_summary(data, genres),
        status=data.get("status") or "",
        runtime=int(runtime) if runtime else None,
        cast=tuple(cast),
        crew=crew,
    )
