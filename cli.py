#!/usr/bin/env python3
"""
CLI for OpenLibrary book lookups.

Features rich console output with spinners, styled tables, and visual
feedback. Lookups go through the in-process book and search caches when
caching is enabled.
"""

import logging

import typer

from mylib.cli.books import book_panel, print_book_list, print_json, upstream_errors
from mylib.cli.common import Icons, console, get_book_cache, get_client, get_search_cache, setup_logging, ui
from mylib.config import get_settings

# Create main app
app = typer.Typer(
    name="mylib",
    help="📚 OpenLibrary book lookups with TTL caching",
    rich_markup_mode="rich",
)

logger = logging.getLogger(__name__)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """OpenLibrary book lookups with TTL caching."""
    setup_logging(verbose=verbose)


@app.command()
def search(
    keywords: str = typer.Argument(..., help="Search keywords"),
    start: int = typer.Option(0, "--start", "-s", min=0, help="Offset of the first result"),
    limit: int = typer.Option(10, "--limit", "-n", min=1, help="Number of results per page"),
    as_json: bool = typer.Option(False, "--json", help="Output raw JSON"),
):
    """Search OpenLibrary by keywords."""
    search_cache = get_search_cache()

    with upstream_errors("Search"):
        with ui.spinner(f"Searching OpenLibrary for '{keywords}'..."):
            if search_cache is not None:
                result = search_cache.search(keywords, start, limit)
            else:
                result = get_client().search_books(keywords, start, limit)

    if as_json:
        print_json(result.model_dump(mode="json"))
        return

    print_book_list(result, keywords)


@app.command()
def book(
    book_id: str = typer.Argument(..., help="OpenLibrary edition ID (e.g. OL7353617M)"),
    as_json: bool = typer.Option(False, "--json", help="Output raw JSON"),
):
    """Show a book by its OpenLibrary edition ID."""
    book_cache = get_book_cache()

    with upstream_errors("Book lookup"):
        with ui.spinner(f"Fetching book {book_id}..."):
            if book_cache is not None:
                result = book_cache.get_book_by_id(book_id)
            else:
                result = get_client().get_book_by_id(book_id)

    if result is None:
        ui.error(f"Book not found: {book_id}")
        raise typer.Exit(1)

    if as_json:
        print_json(result.model_dump(mode="json"))
        return

    console.print(book_panel(result))


@app.command()
def isbn(
    isbn: str = typer.Argument(..., help="ISBN-10 or ISBN-13"),
    as_json: bool = typer.Option(False, "--json", help="Output raw JSON"),
):
    """Show a book by ISBN."""
    with upstream_errors("ISBN lookup"):
        with ui.spinner(f"Fetching ISBN {isbn}..."):
            result = get_client().get_book_by_isbn(isbn)

    if result is None:
        ui.error(f"No book found for ISBN: {isbn}")
        raise typer.Exit(1)

    if as_json:
        print_json(result.model_dump(mode="json"))
        return

    console.print(book_panel(result))


@app.command("config")
def config_command():
    """Show effective settings."""
    settings = get_settings()

    data = {
        "OpenLibrary URL": settings.openlibrary.base_url,
        "Covers URL": settings.openlibrary.covers_base_url,
        "Timeout": f"{settings.openlibrary.timeout}s",
        "Caching": "enabled" if settings.cache.enabled else "disabled",
        "Cache TTL": f"{settings.cache.ttl_seconds:g}s",
        "Cleanup interval": f"{settings.cache.cleanup_interval_seconds:g}s",
        "Share book cache": settings.cache.share_book_cache,
        "Log level": settings.logging.level,
        "Log file": settings.logging.file_path,
    }
    console.print(ui.panel(ui.key_value_table(data), title=f"{Icons.GEAR} Settings"))


if __name__ == "__main__":
    app()
