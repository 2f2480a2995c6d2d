"""JSON formatter for goality reports."""

import json

from ..tree.models import View
from .base import BaseFormatter, ordered_sub_views, report_linters


class JsonFormatter(BaseFormatter):
    """Render a view as JSON."""

    def render(self, view, file=None) -> None:
        print(self.format(view), file=file)

    def format(self, view: View) -> str:
        linters = report_linters(view)
        data = {
            "path": view.path,
            "linters": linters,
            "sub_views": [
                {
                    "path": sv.path,
                    "line_count": sv.line_count,
                    "issues": {linter: sv.issue_count(linter) for linter in linters},
                    "rates": {linter: round(sv.occurrence_rate(linter), 2) for linter in linters},
                }
                for sv in ordered_sub_views(view)
            ],
        }
        return json.dumps(data, indent=2)
