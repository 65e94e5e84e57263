"""
Rendering and error helpers for the book lookup commands.
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from mylib.openlibrary import Book, BookList, OpenLibraryConnectionError, OpenLibraryError, UnexpectedStatusError

from .common import Icons, console, ui

logger = logging.getLogger(__name__)


@contextmanager
def upstream_errors(action: str) -> Iterator[None]:
    """Turn OpenLibrary failures into a friendly message and exit code 1."""
    try:
        yield
    except UnexpectedStatusError as e:
        code = e.status_code if e.status_code is not None else "n/a"
        ui.error(f"{action} failed", details=f"{e} (stage: {e.stage}, status: {code})")
        logger.debug("Upstream error during %s: %s", action, e)
        raise typer.Exit(1)
    except OpenLibraryConnectionError as e:
        ui.error(f"{action} failed", details=f"Could not reach OpenLibrary during {e.stage} lookup")
        logger.debug("Connection error during %s: %s", action, e)
        raise typer.Exit(1)
    except OpenLibraryError as e:
        ui.error(f"{action} failed", details=str(e))
        raise typer.Exit(1)


def print_json(data: dict) -> None:
    """Print plain JSON (no Rich styling) so output can be piped."""
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def book_panel(book: Book) -> Panel:
    """Key/value panel for one book."""
    data = {
        "ID": book.book_id,
        "Title": book.title,
        "Subtitle": book.subtitle,
        "Authors": ", ".join(book.authors) if book.authors else None,
        "Published": book.publish_date,
        "ISBNs": ", ".join(book.isbns) if book.isbns else None,
        "Cover": book.cover_url_large,
    }
    table = ui.key_value_table(data)
    if book.description:
        table.add_row("Description", Text(book.description))
    return ui.panel(table, title=f"{Icons.BOOK} {book.title or book.book_id}")


def book_list_table(result: BookList, keywords: str) -> Table:
    """Table with one row per resolved search hit."""
    table = ui.create_table(title=f"{Icons.SEARCH} Results for '{keywords}'")
    table.add_column("#", style="muted", justify="right")
    table.add_column("ID", style="book_id", no_wrap=True)
    table.add_column("Title", style="title")
    table.add_column("Author", style="author")
    table.add_column("Published")

    for offset, book in enumerate(result.books):
        table.add_row(
            str(result.start_index + offset + 1),
            book.book_id,
            book.title or "",
            book.primary_author or "",
            book.publish_date or "",
        )
    return table


def print_book_list(result: BookList, keywords: str) -> None:
    """Print a result page with its totals."""
    if not result.books:
        ui.warning(f"No books found for '{keywords}'")
    else:
        console.print(book_list_table(result, keywords))

    console.print(f"  {Icons.BULLET} Total matches: [bold]{result.num_results}[/bold]")
    if result.skipped_books:
        console.print(f"  {Icons.BULLET} Skipped (no edition): [warning]{result.skipped_books}[/warning]")
