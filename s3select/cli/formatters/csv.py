"""
CSV formatter in the scan's own wire convention
"""

from typing import Any, Dict, List

from s3select.cli.formatters.base import BaseFormatter, render_value


class CSVFormatter(BaseFormatter):
    """
    Format results as comma-separated text

    Values use render_value() and NULL is an empty field, which is exactly
    what a scan decodes. With header=False the output can be stored as a
    headerless CSV object and read back with {"format": "csv", "header": "false"}.
    Values containing the delimiter or a line break are rejected instead of
    quoted, since the scan splits on the delimiter without quoting.
    """

    aliases = ("text",)

    def format(self, results: List[Dict[str, Any]], **kwargs) -> str:
        """
        Format results as CSV

        Args:
            results: Rows as dictionaries
            **kwargs: Options 'columns', 'header' (default True), 'delimiter'

        Returns:
            CSV string, one line per row

        Raises:
            ValueError: If a value contains the delimiter or a line break
        """
        columns = self.columns_for(results, **kwargs)
        if not columns:
            return ""

        delimiter = kwargs.get("delimiter", ",")
        lines = []
        if kwargs.get("header", True):
            lines.append(delimiter.join(columns))

        for line_number, row in enumerate(results, start=1):
            fields = []
            for col in columns:
                text = render_value(row.get(col))
                if text is None:
                    text = ""
                elif delimiter in text or "\n" in text or "\r" in text:
                    raise ValueError(
                        f"Row {line_number} column '{col}' contains {delimiter!r} or a line break: {text!r}"
                    )
                fields.append(text)
            lines.append(delimiter.join(fields))

        return "".join(line + "\n" for line in lines)
