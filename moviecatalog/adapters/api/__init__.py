"""
Client de l'API TMDB et infrastructure associee.

Ce module fournit:
- TMDBClient: transport HTTP vers l'API TMDB v3
- APICache / make_cache_key: cache des reponses avec TTL
- GenreLookup: table des genres (id -> nom) au TTL long
- request_with_resilience, with_retry, with_timeout: politiques de resilience
- tmdb_mapper: conversion JSON TMDB -> entites du catalogue
"""

from moviecatalog.adapters.api.cache import APICache, make_cache_key
from moviecatalog.adapters.api.genres import UNKNOWN_GENRE_NAME, GenreLookup
from moviecatalog.adapters.api.resilience import (
    request_with_resilience,
    with_retry,
    with_timeout,
)
from moviecatalog.adapters.api.tmdb_client import TMDBClient

__all__ = [
    "APICache",
    "GenreLookup",
    "TMDBClient",
    "UNKNOWN_GENRE_NAME",
    "make_cache_key",
    "request_with_resilience",
    "with_retry",
    "with_timeout",
]
