"""The analysed project: tree ownership, issue merging and view queries."""

from __future__ import annotations

from typing import Optional

from ..exceptions import ProjectSealedError, ViewsNotBuiltError
from ..logging_config import get_logger
from .aggregation import (
    ViewOptions,
    build_views,
    merge_view_options,
    resolve_sub_view,
    views_at_depth,
)
from .models import Directory, Issue, SubView, View, split_path

logger = get_logger(__name__)


class Project:
    """One analysis run over a directory tree.

    The tree is written only by the lint phase (``add_issue``). ``seal()``
    freezes it and builds every aggregated view; queries are only valid on a
    sealed project.
    """

    def __init__(self, path: str, root: Directory, linters: Optional[list[str]] = None):
        self.path = path
        self.root = root
        self.linters: list[str] = list(linters or [])
        self.dropped_issues = 0
        self._sealed = False

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        if self._sealed:
            return
        build_views(self.root)
        self._sealed = True

    def add_issue(self, issue: Issue) -> bool:
        """Merge an issue into the file it refers to.

        Returns False (and drops the issue) when the path is not in the tree.
        """
        if self._sealed:
            raise ProjectSealedError(self.path)

        components = split_path(issue.file_path)
        directory = self.root.find(components[:-1]) if components else None
        file = directory.files.get(components[-1]) if directory is not None else None
        if file is None:
            logger.warning(
                "Entry %r for issue from %s does not exist in the project tree.",
                issue.file_path,
                issue.from_linter,
            )
            self.dropped_issues += 1
            return False

        file.add_issue(issue)
        return True

    def directory(self, path: str) -> Optional[Directory]:
        return self.root.find(split_path(path))

    def sub_view(self, path: str) -> Optional[SubView]:
        self._require_views()
        sub_view = resolve_sub_view(self.root, path)
        return sub_view.copy() if sub_view is not None else None

    def generate_view(self, *options: ViewOptions) -> View:
        """Aggregate the project at the requested granularity.

        Without options the whole tree is returned as a single ``./...``
        sub-view. The sub-views are copies; changing them does not affect
        later queries.
        """
        self._require_views()
        opt = merge_view_options(*options)

        sub_views: list[SubView] = []
        if opt.depth >= 0 or not opt.paths:
            sub_views.extend(view.copy() for view in views_at_depth(self.root, opt.depth))
        for path in opt.paths:
            sub_view = resolve_sub_view(self.root, path)
            if sub_view is None:
                logger.warning("Requested path %r does not exist in the project.", path)
                continue
            sub_views.append(sub_view.copy())

        return View(
            path=self.path,
            sub_views={sub_view.path: sub_view for sub_view in sub_views},
            linters=list(self.linters),
        )

    def _require_views(self) -> None:
        if not self._sealed:
            raise ViewsNotBuiltError(self.path)
