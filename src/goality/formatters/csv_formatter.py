"""CSV formatter for goality reports."""

import csv
import io

from ..tree.models import View
from .base import BaseFormatter, linter_cells, ordered_sub_views, report_linters


class CsvFormatter(BaseFormatter):
    """Render a view as CSV.

    Each linter header spans two columns: the issue count and the number of
    issues per 1000 lines of code.
    """

    def format(self, view: View) -> str:
        if not view.sub_views:
            return ""
        linters = report_linters(view)

        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        header = ["path"]
        for linter in linters:
            header.extend([linter, ""])
        writer.writerow(header)

        for sub_view in ordered_sub_views(view):
            row = [sub_view.path]
            for count, rate in linter_cells(sub_view, linters):
                row.extend([str(count), f"{rate:.2f}"])
            writer.writerow(row)
        return output.getvalue()
