"""
Table des genres TMDB (id -> nom) adossee au cache des reponses.

Les listes de films ne portent que des IDs de genre: la table permet de les
resoudre en noms sans appel reseau. Elle est conservee dans APICache sous
une cle unique avec un TTL long (les genres changent rarement) et recopiee
en memoire a chaque lecture ou ecriture pour que resolve() reste synchrone.

Le rafraichissement depuis l'API n'est pas fait ici: c'est CatalogService
qui appelle list_genres() avant de mapper une liste.
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from moviecatalog.adapters.api.cache import APICache
from moviecatalog.core.entities import Genre

# Nom attribue a un ID de genre absent de la table
UNKNOWN_GENRE_NAME = "Unknown"


class GenreLookup:
    """
    Cache specialise de la liste complete des genres.

    Attributes:
        CACHE_KEY: Cle de la liste des genres dans APICache
        DEFAULT_TTL: Duree de vie de la liste (1 jour)

    Example:
        lookup = GenreLookup(cache)
        await lookup.set([Genre(28, "Action")])
        lookup.resolve(28)   # "Action"
        lookup.resolve(99)   # "Unknown"
    """

    CACHE_KEY = "/genre/movie/list"
    DEFAULT_TTL = 24 * 60 * 60  # 1 jour en secondes (86400)

    def __init__(self, cache: APICache, ttl: float = DEFAULT_TTL) -> None:
        self._cache = cache
        self._ttl = ttl
        self._names: dict[int, str] = {}
        self._loaded = False

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def is_warm(self) -> bool:
        """Vrai si la table a ete chargee au moins une fois."""
        return self._loaded

    @property
    def table(self) -> Mapping[int, str]:
        """Vue en lecture seule de la table courante id -> nom."""
        return MappingProxyType(self._names)

    async def get(self) -> Optional[tuple[Genre, ...]]:
        """
        Lit la liste des genres depuis le cache.

        Returns:
            Tuple de Genre, ou None si absente ou expiree
        """
        genres = await self._cache.get(self.CACHE_KEY)
        if genres is not None:
            self._remember(genres)
        return genres

    async def set(self, genres: Iterable[Genre]) -> None:
        """
        Stocke la liste des genres avec le TTL long.

        Args:
            genres: Liste complete des genres retournee par TMDB
        """
        genres = tuple(genres)
        await self._cache.set(self.CACHE_KEY, genres, self._ttl)
        self._remember(genres)

    def resolve(self, genre_id: int) -> str:
        """
        Resout un ID de genre sans appel reseau.

        Args:
            genre_id: ID de genre TMDB

        Returns:
            Nom du genre, ou UNKNOWN_GENRE_NAME si l'ID est inconnu
        """
        return self._names.get(genre_id, UNKNOWN_GENRE_NAME)

    def _remember(self, genres: Iterable[Genre]) -> None:
        # Remplacement en bloc: un lecteur concurrent voit l'ancienne ou la nouvelle table
        self._names = {genre.id: genre.name for genre in genres}
        self._loaded = True
