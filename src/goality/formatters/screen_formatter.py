"""Terminal formatter for goality reports."""

import io
from typing import IO, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from ..tree.models import View
from .base import (
    DATA_FORMAT_NOTE,
    REPORT_TITLE,
    BaseFormatter,
    linter_cells,
    ordered_sub_views,
    report_linters,
)


class ScreenFormatter(BaseFormatter):
    """Aligned table with one ``count (rate)`` cell per linter."""

    def __init__(self, width: int = 200):
        self.width = width

    def render(self, view: View, file: Optional[IO[str]] = None) -> None:
        if not view.sub_views:
            return
        console = Console(file=file, highlight=False) if file else Console(highlight=False)
        self._print(console, view)

    def format(self, view: View) -> str:
        if not view.sub_views:
            return ""
        buffer = io.StringIO()
        console = Console(file=buffer, width=self.width, no_color=True, highlight=False)
        self._print(console, view)
        return buffer.getvalue()

    def build_table(self, view: View) -> Table:
        linters = report_linters(view)
        table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False)
        table.add_column("path", no_wrap=True)
        for linter in linters:
            table.add_column(linter, no_wrap=True)

        for sub_view in ordered_sub_views(view):
            cells = [f"{count} ({rate:.2f})" for count, rate in linter_cells(sub_view, linters)]
            table.add_row(sub_view.path, *cells)
        return table

    def _print(self, console: Console, view: View) -> None:
        console.print(REPORT_TITLE.format(path=view.path), markup=False)
        console.print()
        console.print(self.build_table(view))
        console.print()
        console.print(DATA_FORMAT_NOTE, markup=False)
