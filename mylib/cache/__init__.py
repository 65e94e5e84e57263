"""
In-process TTL caches for OpenLibrary data.

Provides:
- ExternalBookCache: book id -> Book (negative results cached too)
- SearchResultCache: (keywords, start, limit) -> BookList
- Periodic background sweep of expired entries
"""

from .base import DEFAULT_CLEANUP_INTERVAL_SECONDS, DEFAULT_TTL_SECONDS, TTLCache
from .book_cache import ExternalBookCache
from .entry import CacheEntry
from .search_cache import SearchKey, SearchResultCache

__all__ = [
    "CacheEntry",
    "DEFAULT_CLEANUP_INTERVAL_SECONDS",
    "DEFAULT_TTL_SECONDS",
    "ExternalBookCache",
    "SearchKey",
    "SearchResultCache",
    "TTLCache",
]
