"""
Relation - the SELECT-pushdown view over a set of objects

A Relation binds a location, scan params and a declared schema. Each scan
lists the objects under the location, sends one SELECT per object with the
requested projection and filters, and casts the returned text into typed rows.

Example:
    ```python
    from s3select import Relation

    users = Relation(
        "s3://analytics/users/*",
        {"format": "parquet"},
        "id INTEGER NOT NULL, name STRING",
    )
    rows = users.scan(columns=["name"], filters=[Condition("id", ">", 10)])
    ```
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import closing
from typing import Any, Iterator, List, Mapping, Optional, Sequence

from s3select.core.errors import CastError, ParseError
from s3select.core.result import RowCollection
from s3select.core.typecast import cast
from s3select.core.types import Schema, resolve_schema
from s3select.optimizers.column_pruning import prune_schema
from s3select.select.query_builder import QueryBuilder
from s3select.sql.ast_nodes import Filter
from s3select.storage.client import create_client
from s3select.storage.config import StorageConfig
from s3select.storage.lister import ObjectLister
from s3select.storage.location import Location
from s3select.storage.streamer import RowStreamer

logger = logging.getLogger(__name__)


class Relation:
    """
    Queryable view over every object under a location

    The location, params and schema are fixed at construction; scans keep
    no state between calls, so a relation can be scanned repeatedly (and
    concurrently, given a thread-safe client).
    """

    def __init__(
        self,
        location: str,
        params: Optional[Mapping[str, str]] = None,
        schema: Any = None,
        config: Optional[StorageConfig] = None,
        client=None,
        max_workers: int = 1,
    ):
        """
        Initialize relation

        Args:
            location: Location pointer, e.g. "s3://bucket/prefix*"
            params: Scan params (format, compression, CSV dialect)
            schema: Declared schema: Schema, list of Field, {name: type} or DDL string
            config: Storage settings; defaults to StorageConfig()
            client: Storage client; built from config when omitted
            max_workers: Objects fetched concurrently per scan

        Raises:
            ConfigError: If the schema is missing or invalid, the location is
                invalid, or params are unsupported
        """
        self._schema = resolve_schema(schema)
        self.location = Location.parse(location)
        self.params = dict(params or {})
        self.config = config or StorageConfig()
        self.max_workers = max(1, max_workers)

        self.builder = QueryBuilder(self._schema, self.params, self.config)
        self.client = client if client is not None else create_client(self.config)
        self.lister = ObjectLister(self.client)
        self.streamer = RowStreamer(self.client)

    @property
    def schema(self) -> Schema:
        """Declared schema of the relation"""
        return self._schema

    def __repr__(self) -> str:
        return f"Relation({self.location.uri}, {self._schema!r})"

    def effective_schema(self, columns: Optional[Sequence[str]] = None) -> Schema:
        """Schema of the rows a scan with these columns returns"""
        if columns is None:
            return self._schema
        return prune_schema(self._schema, columns)

    def explain(
        self,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[Sequence[Filter]] = None,
    ) -> str:
        """
        Show the SELECT expression a scan would send to each object

        Raises:
            UnknownColumn: If a requested column is not in the schema
            QueryTranslationError: If a filter can't be pushed down
        """
        return self.builder.expression(self.effective_schema(columns), filters)

    def scan(
        self,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[Sequence[Filter]] = None,
    ) -> RowCollection:
        """
        Read every matching row under the location

        Args:
            columns: Columns to return, None for all
            filters: Filters pushed down into the remote SELECT, joined with AND

        Returns:
            RowCollection aligned with the effective schema

        Raises:
            UnknownColumn: Requested column missing from the schema
            QueryTranslationError: Filter can't be pushed down
            ListError: Listing failed
            StreamError: A SELECT request or its response failed
            ParseError, TypeMismatch: A field didn't match its declared type
        """
        schema = self.effective_schema(columns)
        rows = list(self._rows(schema, filters))
        logger.info("Scanned %s: %d rows", self.location.uri, len(rows))
        return RowCollection(schema, rows)

    def scan_lazy(
        self,
        columns: Optional[Sequence[str]] = None,
        filters: Optional[Sequence[Filter]] = None,
    ) -> Iterator[tuple]:
        """
        Yield rows as they are decoded

        Same semantics as scan(), but rows from earlier objects are handed
        out before later objects are read. Pruning and filter translation
        errors are raised here, before any request is made.
        """
        schema = self.effective_schema(columns)
        # Translate eagerly so a bad filter fails before the first request
        self.builder.expression(schema, filters)
        return self._rows(schema, filters)

    def _rows(self, schema: Schema, filters: Optional[Sequence[Filter]]) -> Iterator[tuple]:
        expression = self.builder.expression(schema, filters)
        keys = self.lister.list(self.location.bucket, self.location.prefix)

        if self.max_workers == 1:
            for key in keys:
                yield from self._read_object(key, schema, expression)
            return

        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        try:
            # map() keeps listing order; each object's rows stay grouped
            results = executor.map(
                lambda key: list(self._read_object(key, schema, expression)), keys
            )
            for object_rows in results:
                yield from object_rows
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

    def _read_object(self, key: str, schema: Schema, expression: str) -> Iterator[tuple]:
        query = self.builder.build(self.location.bucket, key, schema, expression=expression)
        count = 0
        with closing(self.streamer.stream(query)) as records:
            for line, record in enumerate(records, start=1):
                yield self._materialize(record, schema, key, line)
                count += 1
        logger.debug("Read %d rows from s3://%s/%s", count, self.location.bucket, key)

    def _materialize(self, record: List[str], schema: Schema, key: str, line: int) -> tuple:
        """Cast one raw record into a typed row"""
        if len(schema) == 0:
            # Zero-column scans project '*'; only the row count matters
            return ()

        if len(record) > len(schema):
            raise ParseError(
                ",".join(record),
                None,
                f"Record has {len(record)} fields, expected {len(schema)} "
                "(values must not contain ',')",
            ).locate(key, line)

        values = []
        for index, field in enumerate(schema):
            text = record[index] if index < len(record) else None
            try:
                values.append(cast(text, field.dtype, field.nullable))
            except CastError as e:
                e.locate(key, line, field.name)
                raise
        return tuple(values)


def relation(
    location: str,
    params: Optional[Mapping[str, str]] = None,
    schema: Any = None,
    config: Optional[StorageConfig] = None,
    **kwargs,
) -> Relation:
    """
    Main entry point for s3select

    Args:
        location: Location pointer, e.g. "s3://bucket/prefix*"
        params: Scan params (format, compression, CSV dialect)
        schema: Declared schema (Schema, list of Field, {name: type} or DDL string)
        config: Storage settings; read from the environment when omitted
        **kwargs: Passed to Relation (client, max_workers)

    Returns:
        Relation

    Examples:
        >>> rel = relation("s3://bucket/events/*", {}, "id LONG NOT NULL, kind STRING")
        >>> rows = rel.scan(columns=["kind"])
    """
    if config is None:
        config = StorageConfig.from_env()
    return Relation(location, params, schema, config=config, **kwargs)
