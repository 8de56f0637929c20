"""
Interface web (FastAPI) du catalogue.

Expose les opérations de IMovieCatalog sous /api/movies et traduit les
erreurs typées du catalogue en codes HTTP.
"""
