"""
goality - Quality reports for Go codebases

Runs golangci-lint over a Go project without exhausting the host's memory,
then aggregates the issues it finds per directory and normalises them by
lines of code, so that the quality of the parts of a codebase can be
compared.
"""

__version__ = "0.1.0"

from .api import parse
from .config import LintOptions, load_config, merge_lint_options
from .tree import Project, SubView, View, ViewOptions, fuse

__all__ = [
    "parse",  # Main entry point
    "LintOptions",
    "load_config",
    "merge_lint_options",
    "Project",
    "SubView",
    "View",
    "ViewOptions",
    "fuse",
]
