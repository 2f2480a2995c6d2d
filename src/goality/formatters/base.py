"""Base formatter interface for goality report rendering."""

from abc import ABC, abstractmethod
from typing import IO, List, Optional, Tuple

from ..tree.models import SubView, View

# Header printed above the screen report.
REPORT_TITLE = "Quality report for Go codebase located at '{path}'"
DATA_FORMAT_NOTE = "Data-format: total-issues (average issues per 1K LoC)"


def path_depth(path: str) -> int:
    return path.count("/")


def ordered_sub_views(view: View) -> List[SubView]:
    """Sub-views ordered by depth first, then lexically by path."""
    return sorted(view.sub_views.values(), key=lambda sv: (path_depth(sv.path), sv.path))


def report_linters(view: View) -> List[str]:
    """Columns of the report: the view's linters, else every linter with issues."""
    if view.linters:
        return list(view.linters)
    return sorted({linter for sv in view.sub_views.values() for linter in sv.issues})


def linter_cells(sub_view: SubView, linters: List[str]) -> List[Tuple[int, float]]:
    return [(sub_view.issue_count(linter), sub_view.occurrence_rate(linter)) for linter in linters]


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    def render(self, view: View, file: Optional[IO[str]] = None) -> None:
        """Write the formatted view to ``file`` (stdout by default)."""
        output = self.format(view)
        if output:
            print(output, end="", file=file)

    @abstractmethod
    def format(self, view: View) -> str:
        """Return formatted string representation of the view."""
