"""
Pushdown rules - shrink what the storage service sends back

- prune_schema: column pruning, projects only the requested columns
- PredicatePushdown: turns scan filters into the remote WHERE clause

Example:
    ```python
    from s3select.optimizers import PredicatePushdown, prune_schema

    effective = prune_schema(schema, ["id", "name"])
    where = PredicatePushdown(schema, lambda c: f's."{c}"').where_clause(filters)
    ```
"""

from s3select.optimizers.column_pruning import prune_schema
from s3select.optimizers.predicate_pushdown import PredicatePushdown

__all__ = ["prune_schema", "PredicatePushdown"]
