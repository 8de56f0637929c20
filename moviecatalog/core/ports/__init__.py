"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Ports catalogue : Contrat consommé par la couche web et la CLI
- IMovieCatalog : Opérations de lecture du catalogue de films
"""

from moviecatalog.core.ports.catalog import IMovieCatalog

__all__ = [
    "IMovieCatalog",
]
