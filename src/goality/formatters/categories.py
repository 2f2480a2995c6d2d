"""Rendering of ranked issue categories."""

import csv
import io
import json
from typing import List

from rich import box
from rich.console import Console
from rich.table import Table

from ..analysis.categories import IssueCategory

MAX_ISSUE_TEXT_WIDTH = 100
CATEGORY_HEADERS = ("occurrences", "linter", "issue")


def shorten(text: str, width: int = MAX_ISSUE_TEXT_WIDTH) -> str:
    """Cut the middle of ``text`` so that it fits in ``width`` characters."""
    if len(text) <= width:
        return text
    head = width // 2 + width % 2 - 2
    tail = width // 2 - 2
    return text[:head] + "...." + text[len(text) - tail:]


def format_categories(categories: List[IssueCategory], fmt: str = "screen") -> str:
    """Format issue categories as ``screen``, ``csv`` or ``json``."""
    if fmt == "json":
        data = [
            {
                "linter": c.linter,
                "representative": c.representative,
                "occurrences": c.occurrences,
                "issues": [issue.to_dict() for issue in c.issues],
            }
            for c in categories
        ]
        return json.dumps(data, indent=2) + "\n"

    rows = [(str(c.occurrences), c.linter, shorten(c.representative)) for c in categories]

    if fmt == "csv":
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(CATEGORY_HEADERS)
        writer.writerows(rows)
        return output.getvalue()

    if fmt == "screen":
        table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False)
        for header in CATEGORY_HEADERS:
            table.add_column(header, no_wrap=True)
        for row in rows:
            table.add_row(*row)
        buffer = io.StringIO()
        Console(file=buffer, width=200, no_color=True, highlight=False).print(table)
        return buffer.getvalue()

    raise ValueError(f"Unknown format: {fmt!r}. Choose from: csv, json, screen")
