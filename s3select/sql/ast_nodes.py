"""
AST (Abstract Syntax Tree) node definitions for filters and queries

Filters are what a relation pushes down into the remote SELECT. A scan takes
a list of them, implicitly joined with AND; And/Or/Not nest further.
"""

from dataclasses import dataclass, field
from typing import Any, Union

COMPARISON_OPERATORS = ("=", "!=", "<", "<=", ">", ">=")
UNARY_OPERATORS = ("IS NULL", "IS NOT NULL")


@dataclass
class Condition:
    """A single filter condition: column operator value"""

    column: str
    operator: str  # '=', '!=', '<', '<=', '>', '>=', 'IN', 'LIKE', 'IS NULL', 'IS NOT NULL'
    value: Any = None

    def __repr__(self) -> str:
        if self.operator in UNARY_OPERATORS:
            return f"{self.column} {self.operator}"
        return f"{self.column} {self.operator} {self.value!r}"


@dataclass
class And:
    """Conjunction of filters"""

    filters: list["Filter"]

    def __repr__(self) -> str:
        return "(" + " AND ".join(repr(f) for f in self.filters) + ")"


@dataclass
class Or:
    """Disjunction of filters"""

    filters: list["Filter"]

    def __repr__(self) -> str:
        return "(" + " OR ".join(repr(f) for f in self.filters) + ")"


@dataclass
class Not:
    """Negation of a filter"""

    filter: "Filter"

    def __repr__(self) -> str:
        return f"NOT {self.filter!r}"


Filter = Union[Condition, And, Or, Not]


@dataclass
class SelectStatement:
    """
    Represents a complete SELECT statement against one location

    Examples:
        SELECT * FROM 's3://bucket/logs/*'
        SELECT id, name FROM 's3://bucket/users/' WHERE age > 25 LIMIT 10
    """

    columns: list[str]  # ['*'] for all columns, or specific column names
    source: str  # Location pointer (FROM clause)
    where: list[Filter] = field(default_factory=list)
    limit: int | None = None

    def __repr__(self) -> str:
        parts = [f"SELECT {', '.join(self.columns)}"]
        parts.append(f"FROM {self.source}")
        if self.where:
            parts.append("WHERE " + " AND ".join(repr(f) for f in self.where))
        if self.limit is not None:
            parts.append(f"LIMIT {self.limit}")
        return " ".join(parts)
