"""
Erreurs typées du catalogue.

Les couches supérieures (web, CLI) ne voient jamais d'exception httpx brute:
le client TMDB et la couche de résilience traduisent chaque échec dans
cette hiérarchie.

Hiérarchie:
    CatalogError
    ├── UpstreamError
    │   ├── TransientUpstreamError
    │   │   └── RateLimitError
    │   ├── UpstreamTimeoutError
    │   └── ResourceNotFoundError
    ├── OperationCancelledError
    └── ContractViolationError
"""

from typing import Optional


class CatalogError(Exception):
    """Erreur de base de toutes les operations du catalogue."""


class UpstreamError(CatalogError):
    """
    Echec de communication avec le fournisseur TMDB.

    Attributes:
        status_code: Code HTTP de la reponse, ou None pour une erreur reseau
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class TransientUpstreamError(UpstreamError):
    """Erreur reseau, 5xx ou 408: relancee par la politique de retry."""


class RateLimitError(TransientUpstreamError):
    """
    Exception levee quand l'API retourne 429 Too Many Requests.

    Attributes:
        retry_after: Nombre de secondes a attendre (depuis le header Retry-After),
                     ou None si non specifie.
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s", status_code=429)


class UpstreamTimeoutError(UpstreamError):
    """
    Appel abandonne apres depassement du delai.

    Attributes:
        timeout: Delai depasse, en secondes
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self.timeout = timeout
        if timeout is None:
            super().__init__("Upstream call timed out")
        else:
            super().__init__(f"Upstream call timed out after {timeout}s")


class ResourceNotFoundError(UpstreamError):
    """La ressource demandee n'existe pas chez le fournisseur (404)."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=404)


class OperationCancelledError(CatalogError):
    """L'appelant a retire son interet pour la requete (signal d'annulation)."""

    def __init__(self, message: str = "Operation cancelled by caller") -> None:
        super().__init__(message)


class ContractViolationError(CatalogError):
    """Le fournisseur a renvoye une charge utile impossible a interpreter."""
