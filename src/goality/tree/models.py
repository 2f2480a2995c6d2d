"""Data models for the project tree and its aggregated views."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field, replace
from typing import Any, Optional

IssueMap = dict[str, list["Issue"]]


def normalize_path(path: str) -> str:
    """Normalise a relative path to posix form with "." for the root."""
    if not path:
        return "."
    return posixpath.normpath(path.replace("\\", "/"))


def split_path(path: str) -> list[str]:
    """Split a relative path into components; the root yields no components."""
    cleaned = normalize_path(path)
    if cleaned in (".", ""):
        return []
    return cleaned.split("/")


@dataclass
class Issue:
    """A single finding reported by the external linter.

    Mirrors one element of the tool's JSON ``Issues`` array. The payload is
    otherwise opaque; only the position and message take part in sorting.
    """

    from_linter: str
    text: str
    file_path: str
    line: int = 0
    column: int = 0
    offset: int = 0
    severity: str = ""
    source_lines: list[str] = field(default_factory=list)
    replacement: Optional[dict[str, Any]] = None
    line_range: Optional[dict[str, Any]] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Issue:
        pos = data.get("Pos") or {}
        return cls(
            from_linter=data.get("FromLinter", ""),
            text=data.get("Text", ""),
            file_path=normalize_path(pos.get("Filename", "")),
            line=pos.get("Line", 0),
            column=pos.get("Column", 0),
            offset=pos.get("Offset", 0),
            severity=data.get("Severity", ""),
            source_lines=list(data.get("SourceLines") or []),
            replacement=data.get("Replacement"),
            line_range=data.get("LineRange"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "FromLinter": self.from_linter,
            "Text": self.text,
            "Severity": self.severity,
            "SourceLines": list(self.source_lines),
            "Replacement": self.replacement,
            "LineRange": self.line_range,
            "Pos": {
                "Filename": self.file_path,
                "Offset": self.offset,
                "Line": self.line,
                "Column": self.column,
            },
        }

    def sort_key(self) -> tuple[str, int, int, str]:
        return (self.file_path, self.line, self.column, self.text)


@dataclass
class SubView:
    """Aggregated issues and line count for one scope of the project."""

    path: str = ""
    issues: IssueMap = field(default_factory=dict)
    line_count: int = 0
    recursive: bool = False

    def copy(self) -> SubView:
        """Copy whose issue lists can be changed without touching the original."""
        return replace(self, issues={linter: list(found) for linter, found in self.issues.items()})

    def issue_count(self, linter: Optional[str] = None) -> int:
        if linter is not None:
            return len(self.issues.get(linter, []))
        return sum(len(issues) for issues in self.issues.values())

    def occurrence_rate(self, linter: str) -> float:
        """Issues reported by ``linter`` per 1000 lines of code."""
        count = self.issue_count(linter)
        if count == 0 or self.line_count == 0:
            return 0.0
        return 1000 * count / self.line_count

    def summary(self, linters: list[str]) -> str:
        lines = [
            f"Analysis for {self.path} covering {self.line_count / 1000:.2f}k lines of code.",
            "",
            "Linters:",
        ]
        for linter in sorted(linters):
            lines.append(f"- {linter}: {self.occurrence_rate(linter):.2f} issues / 1k LoC")
        lines.append("")
        lines.append(f"Total number of issues: {self.issue_count()}")
        return "\n".join(lines) + "\n"


@dataclass
class View:
    """A caller-requested bundle of sub-views."""

    path: str
    sub_views: dict[str, SubView] = field(default_factory=dict)
    linters: list[str] = field(default_factory=list)


@dataclass
class File:
    """A source file and the issues found in it, grouped by linter."""

    path: str
    line_count: int = 0
    issues: IssueMap = field(default_factory=dict)

    def add_issue(self, issue: Issue) -> None:
        self.issues.setdefault(issue.from_linter, []).append(issue)


@dataclass
class Directory:
    """A directory of the project tree.

    ``self_view`` and ``recursive_view`` stay empty until the project is
    sealed, at which point a single post-order pass fills them.
    """

    path: str
    subdirectories: dict[str, Directory] = field(default_factory=dict)
    files: dict[str, File] = field(default_factory=dict)
    self_view: Optional[SubView] = field(default=None, repr=False, compare=False)
    recursive_view: Optional[SubView] = field(default=None, repr=False, compare=False)

    def has_files(self, recursive: bool) -> bool:
        if self.files:
            return True
        if not recursive:
            return False
        return any(child.has_files(True) for child in self.subdirectories.values())

    def find(self, components: list[str]) -> Optional[Directory]:
        current: Directory = self
        for name in components:
            child = current.subdirectories.get(name)
            if child is None:
                return None
            current = child
        return current

    def iter_files(self):
        """Yield every file in this subtree, own files first."""
        yield from self.files.values()
        for child in self.subdirectories.values():
            yield from child.iter_files()
