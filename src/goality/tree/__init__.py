"""Project tree model, scanning and view aggregation."""

from .aggregation import ViewOptions, fuse, merge_view_options
from .models import Directory, File, Issue, SubView, View
from .project import Project
from .scanner import DEFAULT_EXCLUDED_DIRS, TreeScanner, count_lines

__all__ = [
    "DEFAULT_EXCLUDED_DIRS",
    "Directory",
    "File",
    "Issue",
    "Project",
    "SubView",
    "TreeScanner",
    "View",
    "ViewOptions",
    "count_lines",
    "fuse",
    "merge_view_options",
]
