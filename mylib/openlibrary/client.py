"""
OpenLibrary API client.

Resolves book identifiers into fully populated ``Book`` records by chaining the
book -> work -> author lookups, and pages through keyword searches, falling
back to a work's edition list when a hit has no cover edition.
"""

import logging
import re
from collections.abc import Callable
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .models import (
    BOOKS_PREFIX,
    Book,
    BookList,
    CoverURLs,
    OpenLibraryAuthor,
    OpenLibraryBook,
    OpenLibraryEditions,
    OpenLibrarySearchResponse,
    OpenLibraryWork,
    SearchDoc,
    strip_key_prefix,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openlibrary.org"
DEFAULT_COVERS_BASE_URL = "https://covers.openlibrary.org"
DEFAULT_USER_AGENT = "mylib/1.0 (+https://github.com/mylib/mylib)"

ModelT = TypeVar("ModelT", bound=BaseModel)

BookResolver = Callable[[str], Book | None]


class OpenLibraryError(Exception):
    """Base exception for OpenLibrary API errors."""

    def __init__(self, message: str, status_code: int | None = None, stage: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.stage = stage

    def __str__(self) -> str:
        return self.message


class UnexpectedStatusError(OpenLibraryError):
    """Upstream answered, but not with a usable response."""

    pass


class OpenLibraryConnectionError(OpenLibraryError):
    """Transport failure (refused, reset, timed out) during one stage of a lookup."""

    pass


def build_cover_urls(cover_id: int | None, covers_base_url: str = DEFAULT_COVERS_BASE_URL) -> CoverURLs:
    """
    Build the small/medium/large cover URLs for a cover id.

    Args:
        cover_id: Numeric OpenLibrary cover id, or None
        covers_base_url: Base URL of the covers service

    Returns:
        CoverURLs; all three fields are None when there is no cover id
    """
    if cover_id is None:
        return CoverURLs(None, None, None)
    base = covers_base_url.rstrip("/")
    return CoverURLs(
        small=f"{base}/b/id/{cover_id}-S.jpg",
        medium=f"{base}/b/id/{cover_id}-M.jpg",
        large=f"{base}/b/id/{cover_id}-L.jpg",
    )


def normalize_keywords(keywords: str) -> str:
    """Trim keywords and join them with "+", the delimiter the search endpoint expects."""
    return re.sub(r"\s+", "+", keywords.strip())


class OpenLibraryClient:
    """
    OpenLibrary API client.

    Holds no state besides the HTTP connection pool, so one instance can be
    shared between threads.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        covers_base_url: str = DEFAULT_COVERS_BASE_URL,
        timeout: float = 30.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the OpenLibrary client.

        Args:
            base_url: API base URL (overridable for stub servers in tests)
            covers_base_url: Covers service base URL used for cover image links
            timeout: Request timeout in seconds
            user_agent: User-Agent header sent with every request
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.covers_base_url = covers_base_url.rstrip("/")
        self.timeout = timeout

        logger.debug("Creating OpenLibrary client with base URL: %s", self.base_url)

        self._client = httpx.Client(
            base_url=self.base_url,
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "OpenLibraryClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # =====================
    # Transport
    # =====================

    def _request(
        self,
        stage: str,
        endpoint: str,
        model: type[ModelT],
        params: dict | None = None,
    ) -> ModelT:
        """
        GET an endpoint and parse its body into a model.

        Args:
            stage: Name of the lookup stage, used in error context
            endpoint: API path (e.g. /books/OL1M.json)
            model: Pydantic model the body must validate against
            params: Query parameters

        Returns:
            Parsed model

        Raises:
            UnexpectedStatusError: Non-2xx status, empty or invalid body
            OpenLibraryConnectionError: Transport-level failure
        """
        response = self._send(stage, endpoint, params)
        return self._parse(stage, endpoint, response, model)

    def _request_optional(
        self,
        stage: str,
        endpoint: str,
        model: type[ModelT],
        params: dict | None = None,
    ) -> ModelT | None:
        """Like ``_request``, but a 404 yields None instead of an error."""
        response = self._send(stage, endpoint, params)
        if response.status_code == 404:
            logger.debug("OpenLibrary %s not found: %s", stage, endpoint)
            return None
        return self._parse(stage, endpoint, response, model)

    def _send(self, stage: str, endpoint: str, params: dict | None) -> httpx.Response:
        logger.debug("OpenLibrary request [%s]: GET %s params=%s", stage, endpoint, params)

        try:
            response = self._client.get(endpoint, params=params)
        except httpx.TransportError as e:
            logger.error("Connection error during %s lookup (%s): %s", stage, endpoint, e)
            raise OpenLibraryConnectionError(
                f"OpenLibrary {stage} lookup failed for {endpoint}: {e}",
                stage=stage,
            ) from e

        logger.debug("OpenLibrary response [%s]: %d", stage, response.status_code)
        return response

    def _parse(self, stage: str, endpoint: str, response: httpx.Response, model: type[ModelT]) -> ModelT:
        if not response.is_success:
            logger.error(
                "OpenLibrary %s lookup failed: %d %s (%s)",
                stage,
                response.status_code,
                response.reason_phrase,
                endpoint,
            )
            raise UnexpectedStatusError(
                f"OpenLibrary: Unexpected status code: {response.status_code}",
                status_code=response.status_code,
                stage=stage,
            )

        if not response.content:
            logger.error("OpenLibrary %s returned an empty body (%s)", stage, endpoint)
            raise UnexpectedStatusError(
                f"OpenLibrary: Empty response body with status code: {response.status_code}",
                status_code=response.status_code,
                stage=stage,
            )

        try:
            data: Any = response.json()
        except ValueError as e:
            content_preview = response.text[:200] if response.text else "(empty)"
            logger.debug("OpenLibrary returned non-JSON response: %s - Content preview: %s", e, content_preview)
            raise UnexpectedStatusError(
                f"OpenLibrary: Invalid JSON response with status code: {response.status_code}",
                status_code=response.status_code,
                stage=stage,
            ) from e

        if not isinstance(data, dict):
            raise UnexpectedStatusError(
                f"OpenLibrary: Expected JSON object, got {type(data).__name__}",
                status_code=response.status_code,
                stage=stage,
            )

        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.debug("OpenLibrary %s response failed validation: %s", stage, e)
            raise UnexpectedStatusError(
                f"OpenLibrary: Malformed {stage} response with status code: {response.status_code}",
                status_code=response.status_code,
                stage=stage,
            ) from e

    # =====================
    # Single-hop lookups
    # =====================

    def _get_book(self, book_id: str) -> OpenLibraryBook | None:
        return self._request_optional("book", f"/books/{book_id}.json", OpenLibraryBook)

    def _get_book_by_isbn(self, isbn: str) -> OpenLibraryBook | None:
        return self._request_optional("isbn", f"/isbn/{isbn}.json", OpenLibraryBook)

    def _get_work(self, work_id: str) -> OpenLibraryWork:
        logger.info("Fetching work by ID: %s", work_id)
        return self._request("work", f"/works/{work_id}.json", OpenLibraryWork)

    def _get_author(self, author_id: str) -> OpenLibraryAuthor:
        logger.info("Fetching author by ID: %s", author_id)
        return self._request("author", f"/authors/{author_id}.json", OpenLibraryAuthor)

    def _get_work_editions(self, work_id: str) -> OpenLibraryEditions:
        """Editions of a work; a missing work yields an empty listing."""
        logger.info("Fetching editions for work ID: %s", work_id)
        editions = self._request_optional("editions", f"/works/{work_id}/editions.json", OpenLibraryEditions)
        if editions is None:
            logger.warning("No editions found for work ID %s", work_id)
            return OpenLibraryEditions()
        return editions

    # =====================
    # Aggregation
    # =====================

    def _assemble_book(self, book: OpenLibraryBook) -> Book:
        """Join an edition with its work description and author names."""
        description = None
        author_ids = book.author_ids

        work_id = book.work_id
        if work_id:
            work = self._get_work(work_id)
            description = work.description.value
            if work.author_ids:
                author_ids = work.author_ids
        else:
            logger.debug("Book %s lists no work; skipping description lookup", book.book_id)

        authors: list[str] = []
        for author_id in author_ids:
            name = self._get_author(author_id).name
            if name:
                authors.append(name)
            else:
                logger.warning("Author %s of book %s has no name, leaving it out", author_id, book.book_id)

        covers = build_cover_urls(book.cover_id, self.covers_base_url)

        return Book(
            book_id=book.book_id,
            title=book.title,
            subtitle=book.subtitle,
            authors=authors,
            description=description,
            isbns=book.isbns,
            publish_date=book.publish_date,
            cover_url_small=covers.small,
            cover_url_medium=covers.medium,
            cover_url_large=covers.large,
        )

    def get_book_by_id(self, book_id: str) -> Book | None:
        """
        Fetch a fully resolved book by its OpenLibrary edition id.

        Args:
            book_id: Edition id (e.g. "OL7353617M"); a "/books/" prefix is tolerated

        Returns:
            Book, or None if OpenLibrary does not know the id

        Raises:
            UnexpectedStatusError: Any lookup in the chain answered unexpectedly
            OpenLibraryConnectionError: Any lookup in the chain failed at transport level
        """
        book_id = strip_key_prefix(book_id, BOOKS_PREFIX)
        logger.info("Fetching book by ID: %s", book_id)

        book = self._get_book(book_id)
        if book is None:
            logger.warning("Book not found for ID: %s", book_id)
            return None

        return self._assemble_book(book)

    def get_book_by_isbn(self, isbn: str) -> Book | None:
        """
        Fetch a fully resolved book by ISBN-10 or ISBN-13.

        The ISBN lookup only yields the canonical edition key; the book is then
        resolved through ``get_book_by_id``.

        Returns:
            Book, or None if no edition carries the ISBN
        """
        isbn = isbn.strip().replace("-", "")
        logger.info("Fetching book by ISBN: %s", isbn)

        book = self._get_book_by_isbn(isbn)
        if book is None:
            logger.warning("Book not found for ISBN: %s", isbn)
            return None

        return self.get_book_by_id(book.book_id)

    def _resolve_edition_id(self, doc: SearchDoc) -> str | None:
        """Cover edition of a search hit, or the first keyed edition of its work."""
        if doc.cover_edition_key:
            return strip_key_prefix(doc.cover_edition_key, BOOKS_PREFIX)

        work_id = doc.work_id
        if not work_id:
            return None

        edition_id = self._get_work_editions(work_id).first_book_id()
        if edition_id:
            logger.debug("Fallback edition used for work ID '%s': %s", work_id, edition_id)
        return edition_id

    def search_books(
        self,
        keywords: str,
        start_index: int = 0,
        num_results: int = 10,
        resolve_book: BookResolver | None = None,
    ) -> BookList:
        """
        Search OpenLibrary by keywords and resolve every hit into a Book.

        Hits that cannot be resolved to an edition (no cover edition, no keyed
        edition on the work, or an edition OpenLibrary no longer knows) are
        counted in ``skipped_books`` instead of failing the search.

        Args:
            keywords: Free-text keywords
            start_index: Offset of the first hit
            num_results: Page size
            resolve_book: Resolver for edition ids (defaults to get_book_by_id)

        Returns:
            BookList for the requested page

        Raises:
            UnexpectedStatusError: Search (or a per-hit lookup) answered unexpectedly
            OpenLibraryConnectionError: Transport failure during any lookup
        """
        resolve = resolve_book or self.get_book_by_id
        logger.info("Searching OpenLibrary for keywords: '%s'", normalize_keywords(keywords))

        # Whitespace runs collapse to single spaces, which form-encode as "+"-joined terms
        response = self._request(
            "search",
            "/search.json",
            OpenLibrarySearchResponse,
            params={"q": " ".join(keywords.split()), "offset": start_index, "limit": num_results},
        )

        books: list[Book] = []
        skipped_books = 0

        for doc in response.docs:
            edition_id = self._resolve_edition_id(doc)
            if edition_id is None:
                skipped_books += 1
                logger.warning(
                    "Skipping work ID '%s' (%s): no coverEditionKey or fallback edition found",
                    doc.work_id,
                    doc.title,
                )
                continue

            book = resolve(edition_id)
            if book is None:
                skipped_books += 1
                logger.warning("Skipping edition '%s' (%s): not found upstream", edition_id, doc.title)
                continue

            books.append(book)

        logger.debug("Search returned %d books (%d skipped)", len(books), skipped_books)

        return BookList(
            num_results=response.num_found,
            start_index=response.start if response.start is not None else start_index,
            books=books,
            skipped_books=skipped_books,
        )
