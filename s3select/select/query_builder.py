"""
Remote query construction

Builds the SELECT request sent for one object: which columns to project,
which rows to keep, and how the object and the response are formatted.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence

from s3select.core.types import Schema
from s3select.optimizers.predicate_pushdown import PredicatePushdown
from s3select.select.serialization import OUTPUT_SERIALIZATION, InputFormat
from s3select.sql.ast_nodes import Filter
from s3select.storage.config import StorageConfig

logger = logging.getLogger(__name__)


@dataclass
class RemoteQuery:
    """A SELECT request for a single object"""

    bucket: str
    key: str
    expression: str
    input_serialization: Dict[str, Any]
    output_serialization: Dict[str, Any] = field(default_factory=lambda: dict(OUTPUT_SERIALIZATION))
    sse_customer_key: Optional[str] = None

    def __repr__(self) -> str:
        return f"RemoteQuery(s3://{self.bucket}/{self.key}: {self.expression})"

    def to_request(self) -> Dict[str, Any]:
        """Render as keyword arguments for select_object_content"""
        request = {
            "Bucket": self.bucket,
            "Key": self.key,
            "Expression": self.expression,
            "ExpressionType": "SQL",
            "InputSerialization": self.input_serialization,
            "OutputSerialization": self.output_serialization,
        }
        if self.sse_customer_key is not None:
            request["SSECustomerAlgorithm"] = "AES256"
            request["SSECustomerKey"] = self.sse_customer_key
        return request


class QueryBuilder:
    """
    Build RemoteQuery objects for a relation

    One builder serves every scan of a relation. The declared schema
    resolves the columns that filters reference; the effective schema passed
    to build() decides the projection.

    Example:
        builder = QueryBuilder(schema, {"format": "parquet"}, StorageConfig())
        builder.expression(schema, [Condition("id", ">", 1)])
        -> select s."id", s."name" from S3Object s WHERE s."id" > 1
    """

    def __init__(
        self,
        schema: Schema,
        params: Optional[Mapping[str, str]] = None,
        config: Optional[StorageConfig] = None,
    ):
        """
        Args:
            schema: Declared schema of the relation
            params: Scan params describing the stored objects
            config: Storage settings (SSE-C key)

        Raises:
            ConfigError: If params are invalid
        """
        self.schema = schema
        self.input_format = InputFormat.from_params(params or {})
        self.config = config or StorageConfig()
        self.pushdown = PredicatePushdown(
            schema, self.column_ref, typed_input=not self.input_format.is_text
        )

    def column_ref(self, column: str) -> str:
        """Render a column reference for the input format"""
        if self.input_format.positional:
            return f"s._{self.schema.index_of(column) + 1}"
        return 's."' + column.replace('"', '""') + '"'

    def projection(self, schema: Schema) -> str:
        """Projection list for the effective schema, '*' when it is empty"""
        if len(schema) == 0:
            return "*"
        return ", ".join(self.column_ref(name) for name in schema.get_column_names())

    def expression(self, schema: Schema, filters: Optional[Sequence[Filter]] = None) -> str:
        """
        Build the SQL expression for a scan

        Raises:
            QueryTranslationError: If a filter can't be pushed down
        """
        sql = f"select {self.projection(schema)} from S3Object s"
        where = self.pushdown.where_clause(filters)
        if where:
            sql = f"{sql} {where}"
        return sql

    def build(
        self,
        bucket: str,
        key: str,
        schema: Schema,
        filters: Optional[Sequence[Filter]] = None,
        expression: Optional[str] = None,
    ) -> RemoteQuery:
        """
        Build the request for one object

        Args:
            bucket: Bucket holding the object
            key: Object key
            schema: Effective schema of the scan
            filters: Filters to push down
            expression: Pre-built expression, reused across the objects of a scan

        Returns:
            RemoteQuery

        Raises:
            QueryTranslationError: If a filter can't be pushed down
        """
        if expression is None:
            expression = self.expression(schema, filters)

        logger.debug("SELECT for s3://%s/%s: %s", bucket, key, expression)
        return RemoteQuery(
            bucket=bucket,
            key=key,
            expression=expression,
            input_serialization=self.input_format.to_request(),
            sse_customer_key=self.config.sse_key if self.config.uses_customer_key else None,
        )
