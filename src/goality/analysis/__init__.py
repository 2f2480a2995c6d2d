"""Analysis of the issues collected in a project view."""

from .categories import IssueCategory, normalise, rank_issues

__all__ = ["IssueCategory", "normalise", "rank_issues"]
