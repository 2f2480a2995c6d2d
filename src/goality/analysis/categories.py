"""Group similar issues into categories and rank them by frequency.

Linter messages embed the names of the code elements they refer to, almost
always between quotes. Replacing those fragments with a placeholder makes the
remaining text comparable: messages that are still similar enough after that
are taken to describe the same kind of problem.
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field

from ..tree.models import Issue, View

DEFAULT_SIMILARITY = 0.85
IDENTIFIER_PLACEHOLDER = "<identifier>"
QUOTE_CHARS = ('"', "`", "'")


@dataclass
class IssueCategory:
    linter: str
    representative: str
    issues: list[Issue] = field(default_factory=list)

    @property
    def occurrences(self) -> int:
        return len(self.issues)

    def __str__(self) -> str:
        return f"{self.linter} - {self.representative} - {self.occurrences} occurrences"


def normalise(text: str) -> str:
    """Replace every quoted fragment of an issue message with a placeholder.

    >>> normalise("func `unusedFunc` is unused")
    'func <identifier> is unused'
    """
    for quote in QUOTE_CHARS:
        parts = []
        for idx, element in enumerate(text.split(quote)):
            if idx % 2 == 1:
                parts.append(IDENTIFIER_PLACEHOLDER)
            elif element.strip():
                parts.append(element.strip())
        text = " ".join(parts)
    return text


def similar(a: str, b: str, similarity: float) -> bool:
    return difflib.SequenceMatcher(None, a, b).ratio() >= similarity


def categorise(
    categories: list[IssueCategory], issues: list[Issue], similarity: float
) -> list[IssueCategory]:
    """Add each issue to the first matching category, or open a new one."""
    for issue in issues:
        text = normalise(issue.text)
        for category in categories:
            if similar(category.representative, text, similarity):
                category.issues.append(issue)
                break
        else:
            categories.append(IssueCategory(issue.from_linter, text, [issue]))
    return categories


def rank_issues(view: View, similarity: float = DEFAULT_SIMILARITY) -> list[IssueCategory]:
    """Categorise the issues of every sub-view, most frequent category first.

    Categories never span linters. Ties keep first-seen order, with sub-views
    and linters visited in sorted order.
    """
    if not 0.0 < similarity <= 1.0:
        raise ValueError(f"similarity must be in (0.0, 1.0], got {similarity}")

    by_linter: dict[str, list[IssueCategory]] = {}
    for path in sorted(view.sub_views):
        sub_view = view.sub_views[path]
        for linter in sorted(sub_view.issues):
            by_linter[linter] = categorise(
                by_linter.get(linter, []), sub_view.issues[linter], similarity
            )

    categories = [c for linter in sorted(by_linter) for c in by_linter[linter]]
    categories.sort(key=lambda c: c.occurrences, reverse=True)
    return categories
