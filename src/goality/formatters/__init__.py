"""Output formatters for goality."""

from .base import BaseFormatter
from .categories import format_categories
from .csv_formatter import CsvFormatter
from .json_formatter import JsonFormatter
from .screen_formatter import ScreenFormatter


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "screen", "csv", "json"

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    formatters = {
        "screen": ScreenFormatter,
        "csv": CsvFormatter,
        "json": JsonFormatter,
    }
    cls = formatters.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(formatters))}")
    return cls()


__all__ = [
    "BaseFormatter",
    "ScreenFormatter",
    "CsvFormatter",
    "JsonFormatter",
    "format_categories",
    "get_formatter",
]
