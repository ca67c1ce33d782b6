#!/usr/bin/env python3
"""
Example showing projection and filter pushdown with s3select

Set S3SELECT_EXAMPLE_LOCATION to a prefix holding headered CSV objects with
columns id,name,age to run the scans; without it only the generated SELECT
expressions are printed.
"""

import logging
import os

from s3select import Condition, Or, relation

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

location = os.environ.get("S3SELECT_EXAMPLE_LOCATION", "s3://example-bucket/users/*")
users = relation(location, {"format": "csv"}, "id INTEGER NOT NULL, name STRING, age INT")

print("=" * 60)
print("Pushed-down expressions")
print("=" * 60)

# Example 1: Full scan
print("\n1. All columns")
print(f"   {users.explain()}")

# Example 2: Projection only
print("\n2. Only the name column")
print(f"   {users.explain(columns=['name'])}")

# Example 3: Filters, joined with AND
filters = [Condition("age", ">=", 30), Or([Condition("name", "LIKE", "A%"), Condition("id", "<", 10)])]
print("\n3. Filtered projection")
print(f"   {users.explain(columns=['id', 'name'], filters=filters)}")

if "S3SELECT_EXAMPLE_LOCATION" in os.environ:
    print("\n" + "=" * 60)
    print("Scan results")
    print("=" * 60)

    rows = users.scan(columns=["id", "name"], filters=filters)
    for row in rows:
        print(f"   {row}")

    print("\nAs a DataFrame:")
    print(rows.to_dataframe())
