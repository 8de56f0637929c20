"""
Movie catalog entities.

Immutable values representing movies, genres and credits as seen by the
rest of the application, independently of the TMDB wire format.
"""

from dataclasses import dataclass
from datetime import date
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Genre:
    """
    Movie genre.

    Attributes:
        id: TMDB genre ID
        name: Display name ("Unknown" when the genre catalog is not loaded)
    """

    id: int
    name: str


@dataclass(frozen=True)
class CastMember:
    """
    Actor credited on a movie.

    Attributes:
        id: TMDB person ID
        name: Actor name
        character: Character played
        profile_path: Relative path to the profile picture on the TMDB CDN
        order: Billing order (0 = top billed)
    """

    id: int
    name: str
    character: str = ""
    profile_path: str = ""
    order: int = 0


@dataclass(frozen=True)
class CrewMember:
    """Crew member credited on a movie (director, writer, ...)."""

    id: int
    name: str
    job: str = ""
    department: str = ""
    profile_path: str = ""


@dataclass(frozen=True)
class MovieSummary:
    """
    Movie as returned by the list endpoints (popular, top rated, search).

    Optional text fields are always present: missing values are empty
    strings, never None.

    Attributes:
        id: TMDB movie ID
        title: Localized title
        original_title: Title in the original language
        overview: Plot summary
        poster_path: Relative path to the poster on the TMDB CDN
        backdrop_path: Relative path to the backdrop on the TMDB CDN
        vote_average: Average rating (0-10)
        vote_count: Number of votes
        release_date: Release date, or None if unknown
        genres: Ordered genres
        popularity: TMDB popularity score
        original_language: ISO 639-1 code
        adult: Adult content flag
    """

    id: int
    title: str
    original_title: str = ""
    overview: str = ""
    poster_path: str = ""
    backdrop_path: str = ""
    vote_average: float = 0.0
    vote_count: int = 0
    release_date: Optional[date] = None
    genres: tuple[Genre, ...] = ()
    popularity: float = 0.0
    original_language: str = ""
    adult: bool = False

    @property
    def year(self) -> Optional[int]:
        """Release year, or None if the release date is unknown."""
        return self.release_date.year if self.release_date else None


@dataclass(frozen=True)
class MovieDetail:
    """
    Full movie information.

    Wraps the summary fields rather than extending them.

    Attributes:
        summary: Fields shared with the list endpoints
        status: Production status ("Released", "In Production", ...)
        runtime: Duration in minutes
        cast: Actors sorted by billing order
        crew: Crew members, in upstream order
    """

    summary: MovieSummary
    status: str = ""
    runtime: Optional[int] = None
    cast: tuple[CastMember, ...] = ()
    crew: tuple[CrewMember, ...] = ()

    @property
    def id(self) -> int:
        return self.summary.id

    @property
    def title(self) -> str:
        return self.summary.title

    @property
    def directors(self) -> tuple[CrewMember, ...]:
        """Crew members whose job is Director."""
        return tuple(member for member in self.crew if member.job == "Director")


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    """
    One page of a paginated upstream listing.

    Attributes:
        page: Page number (1-based)
        total_pages: Number of pages available upstream
        total_results: Number of results across all pages
        results: Items of the current page, in upstream order
    """

    page: int
    total_pages: int
    total_results: int
    results: tuple[T, ...] = ()
