"""
Scan results
"""

from typing import Any, Dict, Iterator, List, Sequence

from s3select.core.types import Schema


class RowCollection:
    """
    Rows returned by one scan

    Rows are tuples aligned with the scan's effective schema. Rows from one
    object stay together in the order the service returned them; there is no
    ordering across objects.
    """

    def __init__(self, schema: Schema, rows: Sequence[tuple]):
        self.schema = schema
        self.rows: List[tuple] = list(rows)

    def __iter__(self) -> Iterator[tuple]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index: int) -> tuple:
        return self.rows[index]

    def __repr__(self) -> str:
        return f"RowCollection({len(self.rows)} rows, {self.schema!r})"

    def to_dicts(self) -> List[Dict[str, Any]]:
        """Convert rows to dictionaries keyed by column name"""
        names = self.schema.get_column_names()
        return [dict(zip(names, row)) for row in self.rows]

    def to_dataframe(self):
        """
        Convert rows to a pandas DataFrame

        Returns:
            pandas.DataFrame with one column per schema field
        """
        import pandas as pd

        return pd.DataFrame.from_records(self.rows, columns=self.schema.get_column_names())

    def to_arrow(self):
        """
        Convert rows to a pyarrow Table using the schema's arrow types

        Returns:
            pyarrow.Table
        """
        import pyarrow as pa

        names = self.schema.get_column_names()
        columns = {name: [row[i] for row in self.rows] for i, name in enumerate(names)}
        return pa.Table.from_pydict(columns, schema=self.schema.to_arrow())
