"""
Couche domaine (core).

Contient les entités métier, les ports (interfaces abstraites) et la
hiérarchie d'erreurs exposée aux couches supérieures.
Cette couche n'a AUCUNE dépendance vers l'infrastructure (httpx, diskcache, FastAPI).

Sous-packages :
- entities/ : Entités immuables du catalogue (MovieSummary, MovieDetail, Genre...)
- ports/ : Interfaces abstraites définissant le contrat du catalogue
- errors : Erreurs typées (réseau, annulation, violation de contrat)
"""
