"""
OpenLibrary API client module.
"""

from .client import (
    DEFAULT_BASE_URL,
    DEFAULT_COVERS_BASE_URL,
    BookResolver,
    OpenLibraryClient,
    OpenLibraryConnectionError,
    OpenLibraryError,
    UnexpectedStatusError,
    build_cover_urls,
    normalize_keywords,
)
from .models import (
    AUTHORS_PREFIX,
    BOOKS_PREFIX,
    WORKS_PREFIX,
    Book,
    BookList,
    CoverURLs,
    Description,
    Edition,
    OpenLibraryAuthor,
    OpenLibraryBook,
    OpenLibraryEditions,
    OpenLibrarySearchResponse,
    OpenLibraryWork,
    SearchDoc,
    strip_key_prefix,
)

__all__ = [
    # Client
    "OpenLibraryClient",
    "BookResolver",
    "DEFAULT_BASE_URL",
    "DEFAULT_COVERS_BASE_URL",
    # Exceptions
    "OpenLibraryError",
    "OpenLibraryConnectionError",
    "UnexpectedStatusError",
    # Aggregated models
    "Book",
    "BookList",
    "CoverURLs",
    # Response models
    "Description",
    "Edition",
    "OpenLibraryAuthor",
    "OpenLibraryBook",
    "OpenLibraryEditions",
    "OpenLibrarySearchResponse",
    "OpenLibraryWork",
    "SearchDoc",
    # Helpers
    "AUTHORS_PREFIX",
    "BOOKS_PREFIX",
    "WORKS_PREFIX",
    "build_cover_urls",
    "normalize_keywords",
    "strip_key_prefix",
]
