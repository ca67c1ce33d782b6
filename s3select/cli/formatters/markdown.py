"""
Markdown formatter for documentation and sharing
"""

from typing import Any

from s3select.cli.formatters.base import BaseFormatter, render_value


class MarkdownFormatter(BaseFormatter):
    """Format results as a Markdown table"""

    aliases = ("md",)

    def format(self, results: list[dict[str, Any]], **kwargs) -> str:
        """
        Format results as a Markdown table

        Args:
            results: Rows as dictionaries
            **kwargs: Options like 'columns', 'show_footer'

        Returns:
            Markdown formatted table string
        """
        if not results:
            return "_No results found._"

        columns = self.columns_for(results, **kwargs)

        header = "| " + " | ".join(columns) + " |"
        separator = "| " + " | ".join(":---" for _ in columns) + " |"

        data_rows = []
        for row in results:
            values = []
            for col in columns:
                text = render_value(row.get(col))
                if text is None:
                    values.append("_NULL_")
                else:
                    # Escape pipe characters
                    values.append(text.replace("|", "\\|"))
            data_rows.append("| " + " | ".join(values) + " |")

        output = "\n".join([header, separator] + data_rows)

        if kwargs.get("show_footer", True):
            row_count = len(results)
            output += f"\n\n_{row_count} row{'s' if row_count != 1 else ''}_"

        return output
