"""Aggregation of per-file issues into directory-level views.

Views are built bottom-up in a single post-order pass once the lint phase
has populated the tree (see ``build_views``). Queries afterwards only read
the precomputed ``self_view`` / ``recursive_view`` slots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .models import Directory, File, SubView, split_path


@dataclass(frozen=True)
class ViewOptions:
    """Granularity of a generated view.

    depth: uniform depth of the returned sub-views; negative means no depth.
    paths: explicit project-relative paths to aggregate.
    """

    depth: int = -1
    paths: tuple[str, ...] = ()


def merge_view_options(*options: ViewOptions) -> ViewOptions:
    """Combine several option sets into one.

    The last non-negative depth wins. Paths are sorted and deduplicated, and
    any path that is not deeper than the chosen depth is dropped since the
    depth-based sub-views already cover it.
    """
    depth = -1
    paths: list[str] = []
    for opt in options:
        if opt.depth >= 0:
            depth = opt.depth
        paths.extend(opt.paths)

    kept: list[str] = []
    for path in sorted(set(paths)):
        if len(path.split("/")) <= depth:
            continue
        kept.append(path)
    return ViewOptions(depth=depth, paths=tuple(kept))


def fuse(*views: Optional[SubView]) -> SubView:
    """Merge sub-views into one, concatenating issue lists in input order."""
    fused = SubView()
    for view in views:
        if view is None:
            continue
        for linter, issues in view.issues.items():
            fused.issues.setdefault(linter, []).extend(issues)
        fused.line_count += view.line_count
    return fused


def _sort_issues(view: SubView) -> SubView:
    for issues in view.issues.values():
        issues.sort(key=lambda issue: issue.sort_key())
    return view


def file_view(file: File) -> SubView:
    view = _sort_issues(fuse(SubView(issues=file.issues, line_count=file.line_count)))
    view.path = file.path
    return view


def _label(directory: Directory, recursive: bool) -> str:
    return f"{directory.path}/..." if recursive else directory.path


def build_views(root: Directory) -> None:
    """Fill ``self_view`` and ``recursive_view`` for every directory under root.

    Explicit post-order traversal: a directory is finalised only after all of
    its children, so its recursive view can fuse theirs.
    """
    stack: list[tuple[Directory, bool]] = [(root, False)]
    while stack:
        directory, children_done = stack.pop()
        if not children_done:
            stack.append((directory, True))
            for child in reversed(list(directory.subdirectories.values())):
                stack.append((child, False))
            continue

        self_view = _sort_issues(fuse(*(file_view(f) for f in directory.files.values())))
        self_view.path = _label(directory, recursive=False)
        directory.self_view = self_view

        recursive_view = _sort_issues(
            fuse(self_view, *(c.recursive_view for c in directory.subdirectories.values()))
        )
        recursive_view.path = _label(directory, recursive=True)
        recursive_view.recursive = True
        directory.recursive_view = recursive_view


def views_at_depth(directory: Directory, depth: int) -> list[SubView]:
    """Sub-views partitioning ``directory`` at a uniform depth.

    Depth 0 (or less) is the recursive view of the directory itself. Deeper
    levels contribute each directory's own files plus the recursive views of
    the directories at the target depth.
    """
    if depth <= 0:
        return [directory.recursive_view]
    views = [directory.self_view]
    for child in directory.subdirectories.values():
        views.extend(views_at_depth(child, depth - 1))
    return views


def resolve_sub_view(root: Directory, path: str) -> Optional[SubView]:
    """Return the view for a file, the recursive view for a directory, or None."""
    current = root
    components = split_path(path)
    for idx, name in enumerate(components):
        child = current.subdirectories.get(name)
        if child is not None:
            current = child
            continue
        file = current.files.get(name)
        if file is not None and idx == len(components) - 1:
            return file_view(file)
        return None
    return current.recursive_view

