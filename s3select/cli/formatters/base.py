"""
Base formatter and the text form of typed values

Formatters receive rows already cast to Python values. render_value() turns
a value back into the same text the scan decodes, so CSV output can be
uploaded and queried again with the same schema.
"""

import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence


def render_value(value: Any) -> Optional[str]:
    """
    Canonical text for a typed value, None for NULL

    Examples:
        >>> render_value(True)
        'true'
        >>> render_value(datetime(2024, 1, 2, 3, 4, 5))
        '2024-01-02 03:04:05'
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
        return None
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    return str(value)


class BaseFormatter:
    """Base class for all output formatters"""

    #: Names accepted by get_formatter() besides the class-derived one
    aliases: Sequence[str] = ()

    def format(self, results: List[Dict[str, Any]], **kwargs) -> str:
        """
        Format scan results for output

        Args:
            results: Rows as dictionaries keyed by column name
            **kwargs: Formatter options; 'columns' fixes the column order
                even when there are no rows

        Returns:
            Formatted string ready for output
        """
        raise NotImplementedError("Formatters must implement format() method")

    def get_name(self) -> str:
        """Get formatter name"""
        return self.__class__.__name__.replace("Formatter", "").lower()

    @staticmethod
    def columns_for(results: List[Dict[str, Any]], **kwargs) -> List[str]:
        """Column order: the scan's schema when given, else the first row's keys"""
        columns = kwargs.get("columns")
        if columns:
            return list(columns)
        return list(results[0].keys()) if results else []
