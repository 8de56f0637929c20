"""
MovieCatalog - Facade HTTP d'un catalogue de films adosse a l'API TMDB.

Ce package expose un catalogue pagine et filtrable (films populaires,
mieux notes, recherche, details, genres) sans stockage persistant.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, erreurs typées)
- services/ : Couche application (orchestration cache -> API -> mapping)
- adapters/ : Couche infrastructure (client TMDB, cache, résilience)
- web/ : Interface HTTP (FastAPI)
"""
