"""
Client API externe pour l'enrichissement des metadonnees.

Ce module fournit l'adaptateur AniList (GraphQL) et son infrastructure:
- APICache: Cache persistant des recherches (24h)
- RateLimitError: Exception pour les erreurs 429
- with_retry / request_with_retry: Backoff exponentiel sur 429 et erreurs de transport

Le client implemente IMetadataProvider defini dans core/ports/api_clients.py.
"""

from anilib.adapters.api.anilist_client import AniListClient
from anilib.adapters.api.cache import APICache
from anilib.adapters.api.retry import RateLimitError, request_with_retry, with_retry

__all__ = [
    "AniListClient",
    "APICache",
    "RateLimitError",
    "request_with_retry",
    "with_retry",
]
