"""Shared CLI helpers."""

import os
from pathlib import Path
from typing import List, Optional

from rich.console import Console

from ..exceptions import InvalidPathError

console = Console(stderr=True)


def split_values(values: Optional[List[str]]) -> Optional[tuple]:
    """Flatten repeated and comma-separated option values.

    Returns None when nothing was given so that configured values apply.
    """
    if not values:
        return None
    items = [item.strip() for value in values for item in value.split(",")]
    return tuple(item for item in items if item)


def resolve_config_path(config: Optional[Path], cwd: Path) -> Optional[str]:
    """Linter config paths are relative to the working directory."""
    if config is None:
        return None
    config = config.expanduser()
    if not config.is_absolute():
        config = cwd / config
    return str(config)


def project_relative_paths(paths: List[str], project: Path) -> List[str]:
    """Make absolute ``paths`` relative to ``project``.

    Raises:
        InvalidPathError: If an absolute path lies outside the project
    """
    result = []
    for path in paths:
        if not os.path.isabs(path):
            result.append(path)
            continue
        try:
            rel = os.path.relpath(path, project)
        except ValueError as e:
            # Different drives on Windows.
            raise InvalidPathError(path, f"outside of the targeted project at {project}") from e
        rel = rel.replace(os.sep, "/")
        if rel == ".." or rel.startswith("../"):
            raise InvalidPathError(path, f"outside of the targeted project at {project}")
        result.append(rel)
    return result
