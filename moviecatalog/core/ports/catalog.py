"""
Interface port du catalogue de films.

Définit le contrat consommé par la couche web et la CLI. L'implémentation
(CatalogService) s'appuie sur TMDB, mais les appelants n'en savent rien:
les échecs sont remontés sous forme d'erreurs typées (voir core/errors.py).
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from moviecatalog.core.entities import Genre, MovieDetail, MovieSummary, PaginatedResult


class IMovieCatalog(ABC):
    """
    Opérations de lecture du catalogue de films.

    Toutes les opérations acceptent un signal d'annulation optionnel
    (asyncio.Event). Quand il est levé, l'appel en cours est interrompu et
    OperationCancelledError est levée.
    """

    @abstractmethod
    async def list_popular(
        self,
        page: int = 1,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PaginatedResult[MovieSummary]:
        """
        Retourne une page des films populaires.

        Args :
            page : Numéro de page (commence à 1)
            cancel_event : Signal d'annulation optionnel

        Retourne :
            Page de MovieSummary
        """
        ...

    @abstractmethod
    async def list_top_rated(
        self,
        page: int = 1,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PaginatedResult[MovieSummary]:
        """Retourne une page des films les mieux notés."""
        ...

    @abstractmethod
    async def search(
        self,
        query: Optional[str] = None,
        year: Optional[int] = None,
        language: Optional[str] = None,
        sort_by: Optional[str] = None,
        min_rating: Optional[float] = None,
        genre_id: Optional[int] = None,
        page: int = 1,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> PaginatedResult[MovieSummary]:
        """
        Recherche ou filtre des films.

        Recherche textuelle si query est renseignée, sinon filtrage
        paramétrique (discover). Seuls les filtres renseignés sont transmis.

        Args :
            query : Texte recherché dans les titres
            year : Année de sortie
            language : Langue originale (code ISO 639-1)
            sort_by : Critère de tri TMDB (ex: "popularity.desc")
            min_rating : Note moyenne minimale (0-10)
            genre_id : ID de genre TMDB
            page : Numéro de page (commence à 1)
            cancel_event : Signal d'annulation optionnel
        """
        ...

    @abstractmethod
    async def get_detail(
        self,
        movie_id: int,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Optional[MovieDetail]:
        """
        Récupère le détail d'un film avec son casting.

        Retourne :
            MovieDetail, ou None si le film n'existe pas
        """
        ...

    @abstractmethod
    async def list_genres(
        self,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> list[Genre]:
        """Retourne la liste complète des genres de films."""
        ...
