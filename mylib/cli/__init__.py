"""
CLI module for OpenLibrary lookups.

- common: client/cache factories and logging setup
- books: rendering and error helpers for search, book and isbn commands
"""

from mylib.cli.common import (
    console,
    get_book_cache,
    get_client,
    get_search_cache,
    reset_caches,
    setup_logging,
    ui,
)

__all__ = [
    "console",
    "get_book_cache",
    "get_client",
    "get_search_cache",
    "reset_caches",
    "setup_logging",
    "ui",
]
