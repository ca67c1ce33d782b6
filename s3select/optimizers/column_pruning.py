"""
Column Pruning

Reduces the declared schema to the columns a scan actually needs, so the
remote SELECT projects only those and the response carries nothing else.

This is especially effective for columnar formats like Parquet, where the
service skips reading unprojected column chunks entirely.
"""

import logging
from typing import Iterable

from s3select.core.errors import UnknownColumn
from s3select.core.types import Schema

logger = logging.getLogger(__name__)


def prune_schema(schema: Schema, columns: Iterable[str]) -> Schema:
    """
    Derive the effective schema for a scan

    The result keeps the declared schema's field order, not the order the
    columns were requested in. Repeated names collapse to one field.

    Example:
        declared: (id, name, age)
        prune_schema(declared, ["age", "id"]) -> (id, age)

    Args:
        schema: Declared schema of the relation
        columns: Requested column names

    Returns:
        Pruned schema

    Raises:
        UnknownColumn: If a requested column is not in the schema
    """
    requested = set()
    for column in columns:
        if column not in schema:
            raise UnknownColumn(column, schema.get_column_names())
        requested.add(column)

    pruned = Schema([field for field in schema if field.name in requested])
    logger.debug("Pruned schema to %d of %d columns", len(pruned), len(schema))
    return pruned
