"""Public API for goality.

Example:
    >>> from goality import parse, ViewOptions
    >>> from goality.config import LintOptions
    >>>
    >>> project = parse("/path/to/module", LintOptions(linters=("govet", "unused")))
    >>> view = project.generate_view(ViewOptions(depth=1))
    >>> sorted(view.sub_views)
    ['.', 'bar/...', 'foo/...']
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from .config import LintOptions, merge_lint_options
from .lint.scheduler import LintScheduler, SupervisorFactory
from .logging_config import get_logger
from .tree.project import Project
from .tree.scanner import TreeScanner

logger = get_logger(__name__)


def parse(
    path: str,
    *options: LintOptions,
    supervisor_factory: Optional[SupervisorFactory] = None,
) -> Project:
    """Scan and lint the project rooted at ``path``.

    The steps are strictly sequential:
    1. Merge the lint options (conflicting linter configs are rejected)
    2. Scan the directory tree, counting lines of code per file
    3. Lint the tree, splitting the work whenever memory runs short
    4. Seal the project, building every aggregated view

    Args:
        path: Root directory of the project to analyse
        *options: Lint options, merged with ``merge_lint_options``
        supervisor_factory: Replacement for the default process supervisor

    Returns:
        A sealed Project, ready for ``generate_view`` queries

    Raises:
        ConfigurationError: If the options cannot be merged
        LintError: If scanning or any linter invocation fails
    """
    opts = merge_lint_options(*options)
    root_path = str(Path(path).resolve())

    root = TreeScanner(root_path, exclude_dirs=opts.exclude_dirs).scan()
    project = Project(root_path, root)

    LintScheduler(project, opts, supervisor_factory=supervisor_factory).run()

    project.seal()
    if project.dropped_issues:
        logger.warning(
            "%d issue(s) referred to files outside the scanned tree and were dropped.",
            project.dropped_issues,
        )
    return project
