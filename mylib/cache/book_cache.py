"""
TTL cache in front of OpenLibrary book lookups.
"""

import logging
import time

from ..openlibrary.client import OpenLibraryClient
from ..openlibrary.models import BOOKS_PREFIX, Book, strip_key_prefix
from .base import DEFAULT_CLEANUP_INTERVAL_SECONDS, DEFAULT_TTL_SECONDS, TTLCache
from .entry import Clock

logger = logging.getLogger(__name__)


class ExternalBookCache(TTLCache[str, Book | None]):
    """
    Book id -> Book cache.

    "Not found" is cached like any other outcome, so repeated lookups of an
    unknown id stay local until the entry expires. Errors are never cached.

    Example:
        with ExternalBookCache(client) as cache:
            book = cache.get_book_by_id("OL7353617M")
    """

    name = "book"

    def __init__(
        self,
        client: OpenLibraryClient,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        cleanup_interval_seconds: float = DEFAULT_CLEANUP_INTERVAL_SECONDS,
        clock: Clock = time.monotonic,
    ):
        super().__init__(ttl_seconds=ttl_seconds, cleanup_interval_seconds=cleanup_interval_seconds, clock=clock)
        self.client = client

    def get_book_by_id(self, book_id: str) -> Book | None:
        """
        Return the book for ``book_id``, from cache when fresh.

        Raises:
            UnexpectedStatusError: Upstream failure on a miss (nothing stored)
            OpenLibraryConnectionError: Transport failure on a miss (nothing stored)
        """
        book_id = strip_key_prefix(book_id, BOOKS_PREFIX)
        return self._get_or_fetch(book_id, lambda: self._fetch(book_id))

    def _fetch(self, book_id: str) -> Book | None:
        book = self.client.get_book_by_id(book_id)
        if book is None:
            logger.warning("Book ID %s not found upstream, caching negative result", book_id)
        else:
            logger.info("Cached book %s: %s", book_id, book.title)
        return book
