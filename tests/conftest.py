"""Pytest configuration and shared fixtures."""

import copy
import logging
from typing import Any
from unittest.mock import MagicMock

import httpx
import pytest

from mylib.openlibrary.client import OpenLibraryClient
from mylib.openlibrary.models import Book, BookList

TEST_BASE_URL = "https://openlibrary.test"
TEST_COVERS_BASE_URL = "https://covers.test"


# ============================================================================
# Sample payloads
# ============================================================================

BOOK_FOX = {
    "key": "/books/OL7353617M",
    "title": "Fantastic Mr. Fox",
    "publish_date": "October 1, 1988",
    "covers": [8739161, 8904777],
    "isbn_10": ["0140328726"],
    "isbn_13": ["9780140328721"],
    "works": [{"key": "/works/OL45804W"}],
    "authors": [{"key": "/authors/OL34184A"}],
    "number_of_pages": 96,
}

WORK_FOX = {
    "key": "/works/OL45804W",
    "title": "Fantastic Mr Fox",
    "description": {
        "type": "/type/text",
        "value": "The main character of Fantastic Mr. Fox is an extremely clever anthropomorphized fox.",
    },
    "authors": [{"author": {"key": "/authors/OL34184A"}, "type": {"key": "/type/author_role"}}],
}

AUTHOR_DAHL = {"key": "/authors/OL34184A", "name": "Roald Dahl", "birth_date": "13 September 1916"}

SEARCH_FOX = {
    "numFound": 42,
    "start": 0,
    "docs": [
        {"key": "/works/OL45804W", "title": "Fantastic Mr Fox", "cover_edition_key": "OL7353617M"},
        {"key": "/works/OL99999W", "title": "Fox Without Editions"},
    ],
}


class StubOpenLibrary:
    """
    Path-routed fake of the OpenLibrary API for ``httpx.MockTransport``.

    Unregistered paths answer 404. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        path: str,
        json: Any = None,
        status_code: int = 200,
        content: bytes | None = None,
        error: type[httpx.TransportError] | None = None,
    ) -> None:
        self.routes[path] = {"json": json, "status_code": status_code, "content": content, "error": error}

    def add_book(self, book: dict, work: dict | None = None, authors: list[dict] | None = None) -> None:
        """Register a book together with its work and author records."""
        self.add(f"{book['key']}.json", json=book)
        if work is not None:
            self.add(f"{work['key']}.json", json=work)
        for author in authors or []:
            self.add(f"{author['key']}.json", json=author)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, json={"error": "notfound"})
        if route["error"] is not None:
            raise route["error"]("Connection refused", request=request)
        if route["content"] is not None:
            return httpx.Response(route["status_code"], content=route["content"])
        return httpx.Response(route["status_code"], json=copy.deepcopy(route["json"]))

    def count(self, path: str) -> int:
        return sum(1 for r in self.requests if r.url.path == path)

    @property
    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


class FakeClock:
    """Manually advanced clock in seconds."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stub() -> StubOpenLibrary:
    """Stub API with the Fantastic Mr. Fox book, work and author registered."""
    api = StubOpenLibrary()
    api.add_book(BOOK_FOX, WORK_FOX, [AUTHOR_DAHL])
    return api


@pytest.fixture
def client(stub: StubOpenLibrary):
    """OpenLibrary client wired to the stub API."""
    ol_client = OpenLibraryClient(
        base_url=TEST_BASE_URL,
        covers_base_url=TEST_COVERS_BASE_URL,
        transport=httpx.MockTransport(stub.handler),
    )
    yield ol_client
    ol_client.close()


@pytest.fixture
def sample_book() -> Book:
    return Book(
        book_id="OL7353617M",
        title="Fantastic Mr. Fox",
        authors=["Roald Dahl"],
        description="A clever fox.",
        isbns=["0140328726", "9780140328721"],
        publish_date="October 1, 1988",
        cover_url_small=f"{TEST_COVERS_BASE_URL}/b/id/8739161-S.jpg",
        cover_url_medium=f"{TEST_COVERS_BASE_URL}/b/id/8739161-M.jpg",
        cover_url_large=f"{TEST_COVERS_BASE_URL}/b/id/8739161-L.jpg",
    )


@pytest.fixture
def sample_book_list(sample_book: Book) -> BookList:
    return BookList(num_results=42, start_index=0, books=[sample_book], skipped_books=1)


@pytest.fixture
def mock_client(sample_book: Book, sample_book_list: BookList) -> OpenLibraryClient:
    """Mock OpenLibrary client for cache tests (success path)."""
    ol_client = MagicMock(spec=OpenLibraryClient)
    ol_client.get_book_by_id.return_value = sample_book
    ol_client.search_books.return_value = sample_book_list
    return ol_client


@pytest.fixture(autouse=True)
def cleanup_mylib_logger():
    """Remove handlers attached to the mylib logger during a test."""
    yield
    logger = logging.getLogger("mylib")
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
