"""
Business entities of the movie catalog.

Entities are immutable values built by the mapper from upstream payloads.
Callers receiving them own them; nothing in the catalog mutates them.

Exports:
- Genre: Genre identifier and name
- CastMember / CrewMember: Credits of a movie
- MovieSummary: Movie as returned by list endpoints
- MovieDetail: Summary plus status, runtime and credits
- PaginatedResult: One page of results
"""

from moviecatalog.core.entities.movie import (
    CastMember,
    CrewMember,
    Genre,
    MovieDetail,
    MovieSummary,
    PaginatedResult,
)

__all__ = [
    "CastMember",
    "CrewMember",
    "Genre",
    "MovieDetail",
    "MovieSummary",
    "PaginatedResult",
]
