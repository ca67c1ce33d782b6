"""
Output formatters for CLI

Available formatters:
- TableFormatter: Rich tables
- JSONFormatter: Machine-readable JSON
- CSVFormatter: CSV in the scan's own text convention
- MarkdownFormatter: GitHub Flavored Markdown tables
"""

from s3select.cli.formatters.base import BaseFormatter, render_value
from s3select.cli.formatters.csv import CSVFormatter
from s3select.cli.formatters.json import JSONFormatter
from s3select.cli.formatters.markdown import MarkdownFormatter
from s3select.cli.formatters.table import TableFormatter

__all__ = [
    "BaseFormatter",
    "TableFormatter",
    "JSONFormatter",
    "CSVFormatter",
    "MarkdownFormatter",
    "render_value",
    "get_formatter",
]

FORMATTERS = {
    cls().get_name(): cls
    for cls in (TableFormatter, JSONFormatter, CSVFormatter, MarkdownFormatter)
}

_ALIASES = {alias: name for name, cls in FORMATTERS.items() for alias in cls.aliases}


def get_formatter(format_name: str) -> BaseFormatter:
    """
    Get formatter by name or alias, case-insensitively

    Raises:
        ValueError: If formatter not found
    """
    name = format_name.lower()
    name = _ALIASES.get(name, name)
    if name not in FORMATTERS:
        available = ", ".join(sorted([*FORMATTERS, *_ALIASES]))
        raise ValueError(f"Unknown format: {format_name}. Available formats: {available}")

    return FORMATTERS[name]()
