"""
AdScope Console Interface
==========================

Rich-powered console abstraction shared by the AdScope output layer.

Wraps :class:`rich.console.Console` with severity-coloured messages and
tables, all with consistent styling. Advertisement reports themselves
are printed verbatim through :meth:`ScopeConsole.plain`, bypassing Rich
markup.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

_SCOPE_THEME = Theme(
    {
        "scope.warning": "bold yellow",
        "scope.info": "bold bright_blue",
    }
)


class ScopeConsole:
    """Unified console interface for AdScope.

    Usage::

        con = ScopeConsole()
        con.info("Scanning for BLE advertisements")
        con.plain(report.text)
    """

    def __init__(self, *, quiet: bool = False) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output (useful in library / test mode).
        """
        self._console = Console(
            theme=_SCOPE_THEME,
            quiet=quiet,
            highlight=False,
        )

    # ------------------------------------------------------------------ #
    #  Message helpers (severity-coloured)
    # ------------------------------------------------------------------ #

    def warning(self, message: str) -> None:
        self._console.print(
            f"[scope.warning][⚠] WARNING:[/scope.warning] {message}"
        )

    def info(self, message: str) -> None:
        self._console.print(
            f"[scope.info][ℹ] INFO:[/scope.info] {message}"
        )

    # ------------------------------------------------------------------ #
    #  Table display
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        styles: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Iterable of row tuples; each element is stringified.
            caption:  Optional footer caption.
            styles:   Optional per-column Rich style strings.
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            style = styles[idx] if styles and idx < len(styles) else ""
            tbl.add_column(col_name, style=style)

        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def plain(self, text: str) -> None:
        """Print *text* exactly as given: no markup, highlighting or wrapping."""
        self._console.print(
            text,
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )

    def blank(self, count: int = 1) -> None:
        for _ in range(count):
            self._console.print()
