"""
Common utilities shared across CLI commands.

This module provides:
- Factory functions for the OpenLibrary client and caches
- Logging setup from settings
- Shared console and UI instances
"""

import logging

from mylib.cache import ExternalBookCache, SearchResultCache
from mylib.config import get_settings
from mylib.logging import configure_logging, is_configured
from mylib.openlibrary import OpenLibraryClient
from mylib.utils.ui import Icons, console, ui

__all__ = [
    "console",
    "get_book_cache",
    "get_client",
    "get_search_cache",
    "Icons",
    "logger",
    "reset_caches",
    "setup_logging",
    "ui",
]

logger = logging.getLogger(__name__)

# Shared instances (lazy-loaded)
_client: OpenLibraryClient | None = None
_book_cache: ExternalBookCache | None = None
_search_cache: SearchResultCache | None = None


def setup_logging(verbose: bool = False) -> None:
    """Configure ``mylib`` logging from settings, once per process.

    Args:
        verbose: Force debug level regardless of settings
    """
    if is_configured() and not verbose:
        return

    settings = get_settings()
    level = "debug" if verbose or settings.debug else settings.logging.level
    configure_logging(
        level=level,
        file_path=settings.logging.file_path,
        use_rich=settings.logging.use_rich,
        rich_tracebacks=False,
    )


def get_client() -> OpenLibraryClient:
    """Get the shared OpenLibrary client.

    Returns:
        OpenLibraryClient instance with settings from config
    """
    global _client
    if _client is None:
        settings = get_settings()
        _client = OpenLibraryClient(
            base_url=settings.openlibrary.base_url,
            covers_base_url=settings.openlibrary.covers_base_url,
            timeout=settings.openlibrary.timeout,
            user_agent=settings.openlibrary.user_agent,
        )
    return _client


def get_book_cache() -> ExternalBookCache | None:
    """Get the shared book cache.

    Returns:
        ExternalBookCache with its cleanup daemon running, or None if caching is disabled
    """
    global _book_cache
    settings = get_settings()

    if not settings.cache.enabled:
        return None

    if _book_cache is None:
        _book_cache = ExternalBookCache(
            get_client(),
            ttl_seconds=settings.cache.ttl_seconds,
            cleanup_interval_seconds=settings.cache.cleanup_interval_seconds,
        )
        _book_cache.start_cleanup_daemon()

    return _book_cache


def get_search_cache() -> SearchResultCache | None:
    """Get the shared search result cache.

    Search hits are resolved through the book cache when
    ``cache.share_book_cache`` is set.

    Returns:
        SearchResultCache with its cleanup daemon running, or None if caching is disabled
    """
    global _search_cache
    settings = get_settings()

    if not settings.cache.enabled:
        return None

    if _search_cache is None:
        _search_cache = SearchResultCache(
            get_client(),
            ttl_seconds=settings.cache.ttl_seconds,
            cleanup_interval_seconds=settings.cache.cleanup_interval_seconds,
            book_cache=get_book_cache() if settings.cache.share_book_cache else None,
        )
        _search_cache.start_cleanup_daemon()

    return _search_cache


def reset_caches() -> None:
    """Stop cleanup daemons and drop the shared client and caches."""
    global _client, _book_cache, _search_cache

    for cache in (_search_cache, _book_cache):
        if cache is not None:
            cache.stop_cleanup_daemon()
    if _client is not None:
        _client.close()

    _client = None
    _book_cache = None
    _search_cache = None
