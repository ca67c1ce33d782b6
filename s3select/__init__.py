"""
s3select - query object storage through SELECT pushdown

Reads rows from every object under an S3 (or S3-compatible) prefix by
sending the projection and filters to the service's SELECT API instead of
downloading whole objects.
"""

__version__ = "0.1.0"

# Main API
from s3select.core.relation import Relation, relation
from s3select.core.types import DataType, Field, Schema
from s3select.sql.ast_nodes import And, Condition, Not, Or

__all__ = [
    "__version__",
    "relation",
    "Relation",
    "Schema",
    "Field",
    "DataType",
    "Condition",
    "And",
    "Or",
    "Not",
]
