"""Tests for the SQL front end."""

import pytest

from s3select.sql.ast_nodes import And, Condition, Not, Or
from s3select.sql.parser import SQLParseError, parse


class TestSelect:
    """SELECT list, FROM and LIMIT."""

    def test_select_star(self):
        ast = parse("SELECT * FROM 's3://bucket/data/*'")

        assert ast.columns == ["*"]
        assert ast.source == "s3://bucket/data/*"
        assert ast.where == []
        assert ast.limit is None

    def test_select_columns(self):
        ast = parse("SELECT id, s.name, s.\"city\", \"zip\" FROM 's3://b/p/' s")

        assert ast.columns == ["id", "name", "city", "zip"]

    def test_unquoted_source_and_alias(self):
        ast = parse("select id from s3://bucket/p* as s limit 5")

        assert ast.source == "s3://bucket/p*"
        assert ast.limit == 5

    def test_invalid_limit(self):
        with pytest.raises(SQLParseError, match="LIMIT must be an integer"):
            parse("SELECT * FROM 's3://b/p' LIMIT ten")
        with pytest.raises(SQLParseError, match="non-negative"):
            parse("SELECT * FROM 's3://b/p' LIMIT -1")

    def test_trailing_tokens(self):
        with pytest.raises(SQLParseError, match="Unexpected token"):
            parse("SELECT * FROM 's3://b/p' LIMIT 1 extra")

    def test_missing_from(self):
        with pytest.raises(SQLParseError):
            parse("SELECT id")


class TestWhere:
    """WHERE expressions become pushdown filters."""

    def test_comparisons(self):
        ast = parse("SELECT * FROM 's3://b/p' WHERE age >= 30 AND city = 'New York' AND x<>1")

        assert ast.where == [
            Condition("age", ">=", 30),
            Condition("city", "=", "New York"),
            Condition("x", "!=", 1),
        ]

    def test_literals(self):
        ast = parse(
            "SELECT * FROM 's3://b/p' WHERE a = 1.5 AND b = TRUE AND c = 'it''s' AND d = -2"
        )

        assert [c.value for c in ast.where] == [1.5, True, "it's", -2]

    def test_or_and_precedence(self):
        ast = parse("SELECT * FROM 's3://b/p' WHERE a = 1 OR b = 2 AND c = 3")

        assert ast.where == [
            Or([Condition("a", "=", 1), And([Condition("b", "=", 2), Condition("c", "=", 3)])])
        ]

    def test_parentheses_and_not(self):
        ast = parse("SELECT * FROM 's3://b/p' WHERE NOT (a = 1 OR a = 2) AND b IS NULL")

        assert ast.where == [
            Not(Or([Condition("a", "=", 1), Condition("a", "=", 2)])),
            Condition("b", "IS NULL"),
        ]

    def test_in_like_null_checks(self):
        ast = parse(
            "SELECT * FROM 's3://b/p' WHERE k IN ('x', 'y') AND n NOT IN (1) "
            "AND s LIKE 'a%' AND t IS NOT NULL"
        )

        assert ast.where == [
            Condition("k", "IN", ["x", "y"]),
            Not(Condition("n", "IN", [1])),
            Condition("s", "LIKE", "a%"),
            Condition("t", "IS NOT NULL"),
        ]

    def test_invalid_operator(self):
        with pytest.raises(SQLParseError):
            parse("SELECT * FROM 's3://b/p' WHERE a ~ 1")

    def test_invalid_literal(self):
        with pytest.raises(SQLParseError, match="Invalid literal"):
            parse("SELECT * FROM 's3://b/p' WHERE a = other_column")


def test_statement_repr():
    ast = parse("SELECT id FROM 's3://b/p' WHERE id > 1 LIMIT 2")
    assert repr(ast) == "SELECT id FROM s3://b/p WHERE id > 1 LIMIT 2"
