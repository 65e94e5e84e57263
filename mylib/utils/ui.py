"""
Rich UI utilities for console output.

Usage:
    from mylib.utils.ui import console, ui

    ui.warning("No books found")
    ui.error("Lookup failed", details="Unexpected status code: 500")

    with ui.spinner("Searching OpenLibrary..."):
        page = search_cache.search("dune")

    table = ui.create_table("Results", columns=["ID", "Title"])
    console.print(table)
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from rich.box import ROUNDED, SIMPLE
from rich.console import Console
from rich.panel import Panel
from rich.status import Status
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

# =============================================================================
# Custom Theme
# =============================================================================

MYLIB_THEME = Theme(
    {
        # Status colors
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "debug": "dim",
        "muted": "dim white",
        # UI elements
        "header": "bold magenta",
        "accent": "bold cyan",
        # Data types
        "book_id": "cyan",
        "title": "bold white",
        "author": "italic white",
        "isbn": "yellow",
    }
)

console = Console(theme=MYLIB_THEME, highlight=True, emoji=True)


class Icons:
    """Unicode icons for consistent visual feedback."""

    ERROR = "✗"
    WARNING = "⚠"
    BULLET = "•"

    BOOK = "📚"
    SEARCH = "🔍"
    GEAR = "⚙️"


class UIHelper:
    """Central UI helper for consistent visual output."""

    def __init__(self, console: Console):
        self.console = console
        self.icons = Icons

    def error(self, message: str, details: str | None = None, prefix: str = Icons.ERROR) -> None:
        """Print an error message."""
        self._status_line("error", prefix, Text.from_markup(f"[error]{message}[/error]"), details)

    def warning(self, message: str, details: str | None = None, prefix: str = Icons.WARNING) -> None:
        """Print a warning message."""
        self._status_line("warning", prefix, Text.from_markup(message), details)

    def _status_line(self, style: str, prefix: str, body: Text, details: str | None) -> None:
        text = Text()
        text.append(f"{prefix} ", style=style)
        text.append_text(body)
        if details:
            text.append(f"\n   {details}", style="muted")
        self.console.print(text)

    @contextmanager
    def spinner(self, message: str, spinner_name: str = "dots", style: str = "info") -> Iterator[Status]:
        """Context manager for spinner with status updates."""
        with self.console.status(f"[{style}]{message}[/{style}]", spinner=spinner_name) as status:
            yield status

    def create_table(
        self,
        title: str | None = None,
        columns: list[str] | None = None,
        show_lines: bool = False,
        box_style: Any = ROUNDED,
        header_style: str = "bold cyan",
        border_style: str = "dim",
    ) -> Table:
        """Create a styled table."""
        table = Table(
            title=title,
            show_lines=show_lines,
            box=box_style,
            header_style=header_style,
            border_style=border_style,
            row_styles=["", "dim"],
        )
        for col in columns or []:
            table.add_column(col)
        return table

    def key_value_table(self, data: dict[str, Any], title: str | None = None) -> Table:
        """Create a two-column key-value table."""
        table = Table(title=title, show_header=False, box=SIMPLE, padding=(0, 1))
        table.add_column("Key", style="bold cyan", no_wrap=True)
        table.add_column("Value", style="white")

        for key, value in data.items():
            table.add_row(key, str(value) if value is not None else "[dim]N/A[/dim]")

        return table

    def panel(self, content: Any, title: str | None = None, style: str = "cyan") -> Panel:
        """Create a rounded panel."""
        return Panel(content, title=title, border_style=style, box=ROUNDED, padding=(1, 2))


ui = UIHelper(console)

__all__ = [
    "console",
    "ui",
    "Icons",
    "UIHelper",
    "MYLIB_THEME",
]
