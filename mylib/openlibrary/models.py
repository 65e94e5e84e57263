"""
Pydantic models for OpenLibrary API responses and the aggregated book records.

Upstream models mirror the JSON returned by openlibrary.org and ignore
everything not explicitly declared. ``Book`` and ``BookList`` are the
denormalized results handed to the caches and their callers.
"""

from typing import Any, NamedTuple

from pydantic import BaseModel, Field, field_validator

# Path-style prefixes carried by OpenLibrary keys ("/books/OL1M", "/works/OL1W", ...)
BOOKS_PREFIX = "/books/"
WORKS_PREFIX = "/works/"
AUTHORS_PREFIX = "/authors/"


def strip_key_prefix(key: str, prefix: str) -> str:
    """
    Strip an OpenLibrary path prefix from a key.

    Args:
        key: Key as returned by the API (e.g. "/books/OL123M")
        prefix: Prefix to remove (e.g. "/books/")

    Returns:
        Bare identifier; the key unchanged if the prefix is absent
    """
    if key.startswith(prefix):
        return key[len(prefix) :]
    return key


# =============================================================================
# Upstream response models
# =============================================================================


class KeyRef(BaseModel):
    """A ``{"key": "/type/ID"}`` reference."""

    model_config = {"extra": "ignore"}

    key: str


class Description(BaseModel):
    """Work description, normalized from either a bare string or a typed object."""

    model_config = {"extra": "ignore"}

    value: str | None = None
    type: str | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> "Description":
        """Build a description from the polymorphic ``description`` field."""
        if isinstance(raw, str):
            return cls(value=raw)
        if isinstance(raw, dict):
            value = raw.get("value")
            type_ = raw.get("type")
            return cls(
                value=value if isinstance(value, str) else None,
                type=type_ if isinstance(type_, str) else None,
            )
        return cls()


class WorkAuthor(BaseModel):
    """Author entry on a work: ``{"author": {"key": "/authors/OL1A"}}``."""

    model_config = {"extra": "ignore"}

    author: KeyRef | None = None

    @property
    def author_id(self) -> str | None:
        if self.author is None:
            return None
        return strip_key_prefix(self.author.key, AUTHORS_PREFIX)


class OpenLibraryBook(BaseModel):
    """Edition record from ``/books/{id}.json`` or ``/isbn/{isbn}.json``."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    key: str
    title: str | None = None
    subtitle: str | None = None
    publish_date: str | None = None
    covers: list[int] = Field(default_factory=list)
    cover_i: int | None = None
    isbn_10: list[str] = Field(default_factory=list)
    isbn_13: list[str] = Field(default_factory=list)
    works: list[KeyRef] = Field(default_factory=list)
    authors: list[KeyRef] = Field(default_factory=list)

    @field_validator("isbn_10", "isbn_13", "works", "authors", mode="before")
    @classmethod
    def _none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("covers", mode="before")
    @classmethod
    def _drop_null_covers(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [c for c in v if c is not None]
        return v

    @property
    def book_id(self) -> str:
        return strip_key_prefix(self.key, BOOKS_PREFIX)

    @property
    def cover_id(self) -> int | None:
        """First usable cover id. OpenLibrary uses -1 as a "no cover" placeholder."""
        for cover in self.covers:
            if cover > 0:
                return cover
        return self.cover_i

    @property
    def work_id(self) -> str | None:
        if not self.works:
            return None
        return strip_key_prefix(self.works[0].key, WORKS_PREFIX)

    @property
    def author_ids(self) -> list[str]:
        return [strip_key_prefix(a.key, AUTHORS_PREFIX) for a in self.authors]

    @property
    def isbns(self) -> list[str]:
        return [*self.isbn_10, *self.isbn_13]


class OpenLibraryWork(BaseModel):
    """Work record from ``/works/{id}.json``."""

    model_config = {"extra": "ignore"}

    description: Description = Field(default_factory=Description)
    authors: list[WorkAuthor] = Field(default_factory=list)

    @field_validator("description", mode="before")
    @classmethod
    def _normalize_description(cls, v: Any) -> Description:
        if isinstance(v, Description):
            return v
        return Description.from_raw(v)

    @field_validator("authors", mode="before")
    @classmethod
    def _none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def author_ids(self) -> list[str]:
        return [a.author_id for a in self.authors if a.author_id]


class OpenLibraryAuthor(BaseModel):
    """Author record from ``/authors/{id}.json``."""

    model_config = {"extra": "ignore"}

    name: str | None = None


class Edition(BaseModel):
    """One entry of ``/works/{id}/editions.json``."""

    model_config = {"extra": "ignore"}

    key: str | None = None

    @property
    def book_id(self) -> str | None:
        if not self.key:
            return None
        return strip_key_prefix(self.key, BOOKS_PREFIX)


class OpenLibraryEditions(BaseModel):
    """Editions listing for a work."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    editions: list[Edition] = Field(default_factory=list, alias="entries")

    @field_validator("editions", mode="before")
    @classmethod
    def _none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v

    def first_book_id(self) -> str | None:
        """Key of the first edition that carries one."""
        for edition in self.editions:
            if edition.book_id:
                return edition.book_id
        return None


class SearchDoc(BaseModel):
    """One search hit from ``/search.json``."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    key: str | None = None
    title: str | None = None
    cover_edition_key: str | None = None

    @property
    def work_id(self) -> str | None:
        if not self.key:
            return None
        return strip_key_prefix(self.key, WORKS_PREFIX)


class OpenLibrarySearchResponse(BaseModel):
    """Response body of ``/search.json``."""

    model_config = {"extra": "ignore", "populate_by_name": True}

    num_found: int = Field(default=0, alias="numFound")
    start: int | None = None
    docs: list[SearchDoc] = Field(default_factory=list)

    @field_validator("docs", mode="before")
    @classmethod
    def _none_to_list(cls, v: Any) -> Any:
        return [] if v is None else v


# =============================================================================
# Aggregated models
# =============================================================================


class CoverURLs(NamedTuple):
    """Small/medium/large cover image URLs."""

    small: str | None
    medium: str | None
    large: str | None


class Book(BaseModel):
    """A fully resolved book (edition + work description + author names)."""

    book_id: str
    title: str | None = None
    subtitle: str | None = None
    authors: list[str] = Field(default_factory=list)
    description: str | None = None
    isbns: list[str] = Field(default_factory=list)
    publish_date: str | None = None
    cover_url_small: str | None = None
    cover_url_medium: str | None = None
    cover_url_large: str | None = None

    @property
    def primary_author(self) -> str | None:
        return self.authors[0] if self.authors else None

    @property
    def has_cover(self) -> bool:
        return self.cover_url_medium is not None


class BookList(BaseModel):
    """One page of keyword search results."""

    num_results: int = Field(description="Total matches reported upstream, across all pages")
    start_index: int = 0
    books: list[Book] = Field(default_factory=list)
    skipped_books: int = Field(default=0, description="Hits dropped because no edition could be resolved")

    @property
    def page_size(self) -> int:
        """Number of hits upstream returned for this page."""
        return len(self.books) + self.skipped_books
