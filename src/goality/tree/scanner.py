"""Build the project's directory tree from disk.

Only directories and source files are kept; everything else in the tree is
ignored. Scanning is all-or-nothing: any enumeration or read failure aborts
the whole scan with a ``ScanError``.
"""

import os
from collections.abc import Iterable
from pathlib import Path
from typing import IO

from ..exceptions import ScanError
from ..logging_config import get_logger
from .models import Directory, File

logger = get_logger(__name__)

# Directory names that are never part of the analysed project.
DEFAULT_EXCLUDED_DIRS = frozenset({"mocks", "vendor"})

DEFAULT_SOURCE_SUFFIX = ".go"
DEFAULT_COMMENT_MARKER = "//"


def count_lines(stream: IO[str], comment_marker: str = DEFAULT_COMMENT_MARKER) -> int:
    """Count lines of code in a text stream.

    A line counts when, once stripped, it is non-empty and does not start with
    the single-line comment marker. Block comments are counted as code.
    """
    count = 0
    for raw_line in stream:
        line = raw_line.strip()
        if line and not line.startswith(comment_marker):
            count += 1
    return count


class TreeScanner:
    """Recursively scans a project root into a ``Directory`` tree."""

    def __init__(
        self,
        root: str,
        exclude_dirs: Iterable[str] = (),
        source_suffix: str = DEFAULT_SOURCE_SUFFIX,
        comment_marker: str = DEFAULT_COMMENT_MARKER,
    ):
        self.root = Path(root).resolve()
        self.excluded = DEFAULT_EXCLUDED_DIRS | frozenset(exclude_dirs)
        self.source_suffix = source_suffix
        self.comment_marker = comment_marker

    def scan(self) -> Directory:
        if not self.root.is_dir():
            raise ScanError(self.root, "not a directory")
        logger.info("Parsing project at path %s", self.root)
        return self._scan_directory(".")

    def _scan_directory(self, rel_path: str) -> Directory:
        directory = Directory(path=rel_path)
        abs_path = self.root if rel_path == "." else self.root / rel_path

        try:
            with os.scandir(abs_path) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.error("Could not read content of project directory %s: %s", abs_path, e)
            raise ScanError(abs_path, str(e)) from e

        for entry in entries:
            child_path = entry.name if rel_path == "." else f"{rel_path}/{entry.name}"
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError as e:
                raise ScanError(Path(entry.path), str(e)) from e

            if is_dir:
                if entry.name in self.excluded:
                    logger.debug("Skipping excluded directory %s", child_path)
                    continue
                directory.subdirectories[entry.name] = self._scan_directory(child_path)
            elif entry.name.endswith(self.source_suffix):
                directory.files[entry.name] = self._scan_file(Path(entry.path), child_path)

        return directory

    def _scan_file(self, abs_path: Path, rel_path: str) -> File:
        try:
            with open(abs_path, encoding="utf-8", errors="replace") as f:
                line_count = count_lines(f, self.comment_marker)
        except OSError as e:
            logger.error("Failed to count lines of code in project file %s: %s", abs_path, e)
            raise ScanError(abs_path, str(e)) from e
        return File(path=rel_path, line_count=line_count)
