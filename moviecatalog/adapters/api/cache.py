"""
Cache en memoire de processus pour les reponses de l'API TMDB.

Le cache utilise diskcache dans un repertoire temporaire propre au processus:
rien ne survit a l'arret de l'application. Chaque entree porte sa propre
date d'expiration; une entree expiree est absente, qu'elle ait ete purgee
physiquement ou non.

TTL par defaut:
- Reponses du catalogue (DEFAULT_TTL): 15 minutes
- Liste des genres: voir GenreLookup (1 jour)
"""

import asyncio
import shutil
from functools import partial
from typing import Any, Mapping, Optional
from urllib.parse import urlencode

from diskcache import Cache


def make_cache_key(endpoint: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """
    Construit une cle canonique a partir d'un endpoint et de ses parametres.

    Les parametres sont tries par nom, les valeurs None ignorees et les
    flottants entiers ecrits sans decimale: deux
    requetes semantiquement identiques produisent toujours la meme cle,
    quel que soit l'ordre d'enumeration des parametres.

    Args:
        endpoint: Chemin de l'endpoint (ex: "/discover/movie")
        params: Parametres de requete effectifs

    Returns:
        Cle du type "/discover/movie?page=1&primary_release_year=2020"

    Example:
        >>> make_cache_key("/search/movie", {"query": "matrix", "page": 1})
        '/search/movie?page=1&query=matrix'
    """
    if not params:
        return endpoint
    items = sorted(
        (name, _key_value(value)) for name, value in params.items() if value is not None
    )
    if not items:
        return endpoint
    return f"{endpoint}?{urlencode(items)}"


def _key_value(value: Any) -> str:
    """Forme textuelle d'un parametre; 7.0 et 7 donnent la meme cle."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class APICache:
    """
    Cache asynchrone avec TTL pour les appels API.

    Utilise diskcache pour le stockage et run_in_executor pour
    les operations asynchrones non-bloquantes. diskcache est thread-safe:
    des get/set concurrents sur une meme cle ne corrompent rien, le dernier
    set l'emporte.

    Attributes:
        DEFAULT_TTL: Duree de vie par defaut des entrees (15 minutes)

    Example:
        cache = APICache(default_ttl=900)
        await cache.set("/movie/popular?page=1", result)
        data = await cache.get("/movie/popular?page=1")
        cache.close()
    """

    DEFAULT_TTL = 15 * 60  # 15 minutes en secondes (900)

    def __init__(
        self,
        cache_dir: Optional[str] = None,
        default_ttl: float = DEFAULT_TTL,
    ) -> None:
        """
        Initialise le cache.

        Args:
            cache_dir: Repertoire de stockage. Si None, un repertoire temporaire
                       est cree et supprime a la fermeture du cache.
            default_ttl: Duree de vie par defaut des entrees, en secondes
        """
        self._cache = Cache(cache_dir)
        self._owns_directory = cache_dir is None
        self.default_ttl = default_ttl

    @property
    def directory(self) -> str:
        """Repertoire physique du cache."""
        return self._cache.directory

    async def get(self, key: str) -> Optional[Any]:
        """
        Recupere une valeur du cache.

        Args:
            key: Cle unique identifiant la donnee

        Returns:
            La valeur stockee ou None si absente ou expiree
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._cache.get, key)

    async def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """
        Stocke une valeur dans le cache avec un TTL.

        Args:
            key: Cle unique identifiant la donnee
            value: Valeur a stocker (doit etre serializable)
            ttl: Duree de vie en secondes (defaut: default_ttl)
        """
        expire = self.default_ttl if ttl is None else ttl
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None, partial(self._cache.set, key, value, expire=expire)
        )

    async def clear(self) -> None:
        """Supprime toutes les entrees du cache."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.clear)

    def close(self) -> None:
        """Ferme le cache et supprime son repertoire s'il est temporaire."""
        directory = self._cache.directory
        self._cache.close()
        if self._owns_directory:
            shutil.rmtree(directory, ignore_errors=True)
