"""
TTL cache in front of OpenLibrary keyword searches.
"""

import logging
import time
from typing import NamedTuple

from ..openlibrary.client import OpenLibraryClient, normalize_keywords
from ..openlibrary.models import BookList
from .base import DEFAULT_CLEANUP_INTERVAL_SECONDS, DEFAULT_TTL_SECONDS, TTLCache
from .book_cache import ExternalBookCache
from .entry import Clock

logger = logging.getLogger(__name__)


class SearchKey(NamedTuple):
    """Identity of one cached result page."""

    keywords: str
    start_index: int
    num_results: int

    @classmethod
    def build(cls, keywords: str, start_index: int, num_results: int) -> "SearchKey":
        """Key with normalized keywords, so "a  b" and " a b" share an entry."""
        return cls(normalize_keywords(keywords), start_index, num_results)


class SearchResultCache(TTLCache[SearchKey, BookList]):
    """
    (keywords, start_index, num_results) -> BookList cache.

    When given a ``book_cache``, every search hit is resolved through it, so
    searches both fill and reuse the book cache. Without one, hits are resolved
    by the client directly and only the finished page is cached.
    """

    name = "search"

    def __init__(
        self,
        client: OpenLibraryClient,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        cleanup_interval_seconds: float = DEFAULT_CLEANUP_INTERVAL_SECONDS,
        clock: Clock = time.monotonic,
        book_cache: ExternalBookCache | None = None,
    ):
        super().__init__(ttl_seconds=ttl_seconds, cleanup_interval_seconds=cleanup_interval_seconds, clock=clock)
        self.client = client
        self.book_cache = book_cache

    def search(self, keywords: str, start_index: int = 0, num_results: int = 10) -> BookList:
        """
        Return one page of search results, from cache when fresh.

        Raises:
            UnexpectedStatusError: Upstream failure on a miss (nothing stored)
            OpenLibraryConnectionError: Transport failure on a miss (nothing stored)
        """
        key = SearchKey.build(keywords, start_index, num_results)
        return self._get_or_fetch(key, lambda: self._fetch(key, keywords))

    def _fetch(self, key: SearchKey, keywords: str) -> BookList:
        resolve_book = self.book_cache.get_book_by_id if self.book_cache is not None else None
        result = self.client.search_books(keywords, key.start_index, key.num_results, resolve_book=resolve_book)
        logger.info(
            "Cached search '%s' (start=%d, limit=%d): %d books, %d skipped",
            key.keywords,
            key.start_index,
            key.num_results,
            len(result.books),
            result.skipped_books,
        )
        return result
