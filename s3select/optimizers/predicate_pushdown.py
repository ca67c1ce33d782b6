"""
Predicate Pushdown

Translates scan filters into the WHERE clause of the remote SELECT, so rows
are filtered by the storage service rather than after download.

Nothing re-checks the returned rows locally. A filter that can't be expressed
exactly therefore raises QueryTranslationError instead of being dropped;
dropping it would silently return rows the caller asked to exclude.
"""

import math
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Optional, Sequence

from s3select.core.errors import QueryTranslationError
from s3select.core.types import DataType, Schema
from s3select.sql.ast_nodes import COMPARISON_OPERATORS, And, Condition, Filter, Not, Or

# CAST target names in the S3 Select SQL dialect
_CAST_TYPES = {
    DataType.BYTE: "INT",
    DataType.SHORT: "INT",
    DataType.INTEGER: "INT",
    DataType.LONG: "INT",
    DataType.FLOAT: "FLOAT",
    DataType.DOUBLE: "FLOAT",
    DataType.DECIMAL: "DECIMAL",
    DataType.BOOLEAN: "BOOL",
    DataType.DATE: "TIMESTAMP",
    DataType.TIMESTAMP: "TIMESTAMP",
}


class PredicatePushdown:
    """
    Render filters as an S3 Select WHERE clause

    Example:
        [Condition("age", ">", 30), Condition("city", "=", "NYC")]
        -> WHERE s."age" > 30 AND s."city" = 'NYC'

    Text input formats (CSV) carry every value as a string, so typed columns
    are wrapped in CAST for comparisons and empty strings count as NULL,
    matching how the relation decodes them.
    """

    def __init__(self, schema: Schema, column_ref: Callable[[str], str], typed_input: bool = True):
        """
        Args:
            schema: Declared schema; filters may reference any of its columns
            column_ref: Renders a column name as a reference in the query
            typed_input: False when the input format stores values as text
        """
        self.schema = schema
        self.column_ref = column_ref
        self.typed_input = typed_input

    def where_clause(self, filters: Optional[Sequence[Filter]]) -> str:
        """
        Build the WHERE clause for a list of filters joined with AND

        Args:
            filters: Filters to push down, or None

        Returns:
            "WHERE ..." or an empty string when there are no filters

        Raises:
            QueryTranslationError: If any filter can't be expressed
        """
        if not filters:
            return ""
        return "WHERE " + " AND ".join(self.translate(f) for f in filters)

    def translate(self, filter: Filter) -> str:
        """Translate a single filter to a boolean expression"""
        if isinstance(filter, Condition):
            return self._translate_condition(filter)

        if isinstance(filter, (And, Or)):
            if not filter.filters:
                raise QueryTranslationError("Empty logical expression", filter)
            joiner = " AND " if isinstance(filter, And) else " OR "
            return "(" + joiner.join(self.translate(f) for f in filter.filters) + ")"

        if isinstance(filter, Not):
            return f"NOT ({self.translate(filter.filter)})"

        raise QueryTranslationError("Unsupported filter type", filter)

    def _translate_condition(self, condition: Condition) -> str:
        dtype = self.schema.get_column_type(condition.column)
        if dtype is None:
            raise QueryTranslationError(
                f"Filter references unknown column '{condition.column}'", condition
            )

        ref = self.column_ref(condition.column)
        op = condition.operator.upper()

        if op == "IS NULL":
            if self.typed_input:
                return f"{ref} IS NULL"
            return f"({ref} IS NULL OR {ref} = '')"

        if op == "IS NOT NULL":
            if self.typed_input:
                return f"{ref} IS NOT NULL"
            return f"({ref} IS NOT NULL AND {ref} <> '')"

        if op == "LIKE":
            if not isinstance(condition.value, str):
                raise QueryTranslationError("LIKE pattern must be a string", condition)
            return f"{ref} LIKE {self._quote(condition.value)}"

        if op == "IN":
            values = condition.value
            if isinstance(values, (str, bytes)) or not isinstance(values, (list, tuple, set, frozenset)):
                raise QueryTranslationError("IN requires a list of values", condition)
            if not values:
                raise QueryTranslationError("IN requires at least one value", condition)
            literals = ", ".join(self._literal(v, dtype, condition) for v in values)
            return f"{self._typed_ref(ref, dtype)} IN ({literals})"

        if op == "<>":
            op = "!="
        if op in COMPARISON_OPERATORS:
            literal = self._literal(condition.value, dtype, condition)
            return f"{self._typed_ref(ref, dtype)} {op} {literal}"

        raise QueryTranslationError(f"Unsupported operator '{condition.operator}'", condition)

    def _typed_ref(self, ref: str, dtype: DataType) -> str:
        """Wrap a column reference in CAST when the input stores text"""
        if self.typed_input or dtype == DataType.STRING:
            return ref
        return f"CAST({ref} AS {_CAST_TYPES[dtype]})"

    def _literal(self, value: Any, dtype: DataType, condition: Condition) -> str:
        """Render a Python value as a query literal"""
        if value is None:
            raise QueryTranslationError("Comparison with NULL, use IS NULL", condition)

        # bool before int: bool is a subclass of int
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"

        if isinstance(value, int):
            return str(value)

        if isinstance(value, float):
            if math.isnan(value) or math.isinf(value):
                raise QueryTranslationError("Non-finite numeric literal", condition)
            return repr(value)

        if isinstance(value, Decimal):
            if not value.is_finite():
                raise QueryTranslationError("Non-finite numeric literal", condition)
            return str(value)

        # datetime before date: datetime is a subclass of date
        if isinstance(value, datetime):
            return f"CAST({self._quote(value.isoformat())} AS TIMESTAMP)"

        if isinstance(value, date):
            return f"CAST({self._quote(value.isoformat())} AS TIMESTAMP)"

        if isinstance(value, str):
            if dtype.is_temporal():
                return f"CAST({self._quote(value)} AS TIMESTAMP)"
            return self._quote(value)

        raise QueryTranslationError(f"Unsupported literal type {type(value).__name__}", condition)

    @staticmethod
    def _quote(text: str) -> str:
        return "'" + text.replace("'", "''") + "'"
