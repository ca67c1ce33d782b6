"""Type system for s3select.

This module provides the semantic data types a declared schema can use and the
ordered Schema container that a relation is built around. Schemas are always
supplied by the caller; nothing here inspects data to guess types.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Mapping, Sequence

from s3select.core.errors import ConfigError, UnknownColumn


class DataType(Enum):
    """Semantic types supported in a declared schema."""

    # String types
    STRING = "STRING"

    # Integral types
    BYTE = "BYTE"
    SHORT = "SHORT"
    INTEGER = "INTEGER"
    LONG = "LONG"

    # Fractional types
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    DECIMAL = "DECIMAL"

    # Boolean
    BOOLEAN = "BOOLEAN"

    # Temporal types
    DATE = "DATE"
    TIMESTAMP = "TIMESTAMP"

    def __str__(self) -> str:
        return self.value

    def is_integral(self) -> bool:
        """Check if type is a whole-number type."""
        return self in (DataType.BYTE, DataType.SHORT, DataType.INTEGER, DataType.LONG)

    def is_numeric(self) -> bool:
        """Check if type is numeric (integral, floating point or DECIMAL)."""
        return self.is_integral() or self in (DataType.FLOAT, DataType.DOUBLE, DataType.DECIMAL)

    def is_temporal(self) -> bool:
        """Check if type is temporal (DATE or TIMESTAMP)."""
        return self in (DataType.DATE, DataType.TIMESTAMP)

    @classmethod
    def from_name(cls, name: str) -> "DataType":
        """Resolve a type name or common SQL alias to a DataType.

        Args:
            name: Type name such as "integer", "BIGINT" or "varchar"

        Returns:
            Matching DataType

        Raises:
            ConfigError: If the name is not recognised
        """
        if isinstance(name, DataType):
            return name

        normalized = str(name).strip().upper()
        # DECIMAL(10,2) and VARCHAR(20) carry parameters we don't need
        normalized = re.sub(r"\(.*\)$", "", normalized).strip()

        if normalized in cls.__members__:
            return cls[normalized]
        if normalized in _TYPE_ALIASES:
            return _TYPE_ALIASES[normalized]

        raise ConfigError(f"Unsupported data type: {name}")


_TYPE_ALIASES = {
    "STR": DataType.STRING,
    "TEXT": DataType.STRING,
    "VARCHAR": DataType.STRING,
    "CHAR": DataType.STRING,
    "TINYINT": DataType.BYTE,
    "SMALLINT": DataType.SHORT,
    "INT": DataType.INTEGER,
    "BIGINT": DataType.LONG,
    "REAL": DataType.FLOAT,
    "FLOAT64": DataType.DOUBLE,
    "NUMERIC": DataType.DECIMAL,
    "BOOL": DataType.BOOLEAN,
    "DATETIME": DataType.TIMESTAMP,
}


@dataclass(frozen=True)
class Field:
    """A single named, typed column of a schema"""

    name: str
    dtype: DataType
    nullable: bool = True

    def __repr__(self) -> str:
        suffix = "" if self.nullable else " NOT NULL"
        return f"{self.name}: {self.dtype}{suffix}"


class Schema:
    """Ordered schema definition for a relation.

    Holds the fields in declaration order. Field names are unique and the
    schema of a relation is never empty; an empty Schema only appears as the
    result of pruning to zero columns.
    """

    def __init__(self, fields: Sequence[Field]):
        """Initialize schema.

        Args:
            fields: Fields in column order

        Raises:
            ConfigError: If two fields share a name
        """
        self.fields: tuple[Field, ...] = tuple(fields)
        self._index = {}
        for position, field in enumerate(self.fields):
            if field.name in self._index:
                raise ConfigError(f"Duplicate column '{field.name}' in schema")
            self._index[field.name] = position

    def __getitem__(self, column: str) -> Field:
        """Get a field by name."""
        if column not in self._index:
            raise UnknownColumn(column, self.get_column_names())
        return self.fields[self._index[column]]

    def __contains__(self, column: str) -> bool:
        """Check if column exists in schema."""
        return column in self._index

    def __len__(self) -> int:
        """Get number of columns."""
        return len(self.fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(self.fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return self.fields == other.fields

    def __repr__(self) -> str:
        cols = ", ".join(repr(field) for field in self.fields)
        return f"Schema({cols})"

    def get_column_names(self) -> list[str]:
        """Get list of column names."""
        return [field.name for field in self.fields]

    def index_of(self, column: str) -> int:
        """Get the zero-based position of a column."""
        if column not in self._index:
            raise UnknownColumn(column, self.get_column_names())
        return self._index[column]

    def get_column_type(self, column: str) -> DataType | None:
        """Get type of a column, or None if column doesn't exist."""
        if column not in self._index:
            return None
        return self.fields[self._index[column]].dtype

    def to_dict(self) -> dict[str, Any]:
        """Convert schema to dictionary."""
        return {field.name: field.dtype.value for field in self.fields}

    def to_arrow(self):
        """Convert schema to a pyarrow schema."""
        import pyarrow as pa

        arrow_types = {
            DataType.STRING: pa.string(),
            DataType.BYTE: pa.int8(),
            DataType.SHORT: pa.int16(),
            DataType.INTEGER: pa.int32(),
            DataType.LONG: pa.int64(),
            DataType.FLOAT: pa.float32(),
            DataType.DOUBLE: pa.float64(),
            DataType.DECIMAL: pa.decimal128(38, 18),
            DataType.BOOLEAN: pa.bool_(),
            DataType.DATE: pa.date32(),
            DataType.TIMESTAMP: pa.timestamp("us"),
        }
        return pa.schema(
            [pa.field(f.name, arrow_types[f.dtype], nullable=f.nullable) for f in self.fields]
        )

    @staticmethod
    def from_dict(columns: Mapping[str, Any]) -> "Schema":
        """Build a schema from a {name: type} mapping.

        Every column is nullable. Values may be DataType members or type names.

        Args:
            columns: Mapping of column names to types, in column order

        Returns:
            Schema
        """
        return Schema([Field(name, DataType.from_name(dtype)) for name, dtype in columns.items()])

    @staticmethod
    def parse(ddl: str) -> "Schema":
        """Build a schema from a column definition list.

        Examples:
            >>> Schema.parse("id INTEGER NOT NULL, name STRING")
            Schema(id: INTEGER NOT NULL, name: STRING)
            >>> Schema.parse("price DECIMAL(10,2), ts TIMESTAMP")

        Args:
            ddl: Comma separated "name TYPE [NOT NULL]" definitions

        Returns:
            Schema

        Raises:
            ConfigError: If a definition is malformed
        """
        # Split on commas that are not inside a type's parentheses
        definitions = re.split(r",(?![^(]*\))", ddl)
        fields = []
        for definition in definitions:
            definition = definition.strip()
            if not definition:
                continue
            match = re.fullmatch(
                r"(?P<name>\"[^\"]+\"|[^\s]+)\s+(?P<type>[A-Za-z0-9_]+(?:\s*\([^)]*\))?)"
                r"(?P<not_null>\s+NOT\s+NULL)?(?:\s+NULL)?",
                definition,
                flags=re.IGNORECASE,
            )
            if not match:
                raise ConfigError(f"Invalid column definition: '{definition}'")
            name = match.group("name").strip('"')
            fields.append(
                Field(
                    name=name,
                    dtype=DataType.from_name(match.group("type")),
                    nullable=match.group("not_null") is None,
                )
            )
        return Schema(fields)


def resolve_schema(schema: Any) -> Schema:
    """Validate a user-supplied schema and normalise it to a Schema.

    Accepts a Schema, a sequence of Field objects, a {name: type} mapping or a
    DDL string.

    Raises:
        ConfigError: If the schema is missing, empty or of an unknown form
    """
    if schema is None:
        raise ConfigError("Schema cannot be empty")

    if isinstance(schema, Schema):
        resolved = schema
    elif isinstance(schema, str):
        resolved = Schema.parse(schema)
    elif isinstance(schema, Mapping):
        resolved = Schema.from_dict(schema)
    elif isinstance(schema, Sequence) and all(isinstance(f, Field) for f in schema):
        resolved = Schema(schema)
    else:
        raise ConfigError(f"Unsupported schema definition: {schema!r}")

    if len(resolved) == 0:
        raise ConfigError("Schema cannot be empty")

    return resolved
