"""
Couche adaptateurs (infrastructure).

Les adaptateurs fournissent des implémentations concrètes pour les systèmes externes.

Sous-packages :
- api/ : Client TMDB, cache des réponses, résilience (retry, timeout, annulation)

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""
