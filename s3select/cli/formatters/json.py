"""
JSON formatter for machine-readable output
"""

import json
import math
from datetime import date
from decimal import Decimal
from typing import Any

from s3select.cli.formatters.base import BaseFormatter


class JSONFormatter(BaseFormatter):
    """Format results as JSON"""

    def format(self, results: list[dict[str, Any]], **kwargs) -> str:
        """
        Format results as JSON

        Decimals are written as strings to keep their precision; dates and
        timestamps as ISO 8601.

        Args:
            results: Rows as dictionaries
            **kwargs: Options like 'compact', 'indent'

        Returns:
            JSON string
        """

        def clean_value(val):
            if isinstance(val, float) and (math.isnan(val) or math.isinf(val)):
                return None
            if isinstance(val, Decimal):
                return str(val)
            if isinstance(val, date):
                return val.isoformat()
            return val

        cleaned_results = [{k: clean_value(v) for k, v in row.items()} for row in results]

        if kwargs.get("compact", False):
            return json.dumps(cleaned_results, separators=(",", ":"))
        return json.dumps(cleaned_results, indent=kwargs.get("indent", 2))
