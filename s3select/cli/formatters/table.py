"""
Rich table formatter for terminal output
"""

from typing import Any, Dict, List

from rich import box
from rich.console import Console
from rich.table import Table

from s3select.cli.formatters.base import BaseFormatter, render_value


class TableFormatter(BaseFormatter):
    """Format results as a Rich table"""

    def format(self, results: List[Dict[str, Any]], **kwargs) -> str:
        """
        Format results as a Rich table

        Args:
            results: Rows as dictionaries
            **kwargs: Options like 'columns', 'no_color', 'show_footer'

        Returns:
            Formatted table string
        """
        if not results:
            return "No results found."

        console = Console(force_terminal=not kwargs.get("no_color", False))
        columns = self.columns_for(results, **kwargs)

        # Narrow terminal or many columns: aggressive truncation
        if console.width < 80 or len(columns) > 8:
            table = Table(show_header=True, header_style="bold magenta", box=box.SIMPLE)
            max_width, no_wrap = kwargs.get("max_width", 15), True
        else:
            table = Table(show_header=True, header_style="bold magenta")
            max_width, no_wrap = 30, False

        for col in columns:
            table.add_column(
                col, style="cyan", overflow="ellipsis", max_width=max_width, no_wrap=no_wrap
            )

        for row in results:
            cells = (render_value(row.get(col)) for col in columns)
            table.add_row(*(cell if cell is not None else "[dim]NULL[/dim]" for cell in cells))

        with console.capture() as capture:
            console.print(table)
        output = capture.get()

        if kwargs.get("show_footer", True):
            row_count = len(results)
            with console.capture() as capture:
                console.print(f"[dim]{row_count} row{'s' if row_count != 1 else ''}[/dim]")
            output += capture.get()

        return output
