"""
SQL Parser - Hand-written recursive descent parser

Parses the SQL subset accepted by the command line front end:
- SELECT column1, column2 FROM 's3://bucket/prefix*'
- WHERE with AND / OR / NOT and parentheses
- comparisons (=, !=, <>, <, <=, >, >=), IN (...), LIKE, IS [NOT] NULL
- LIMIT n

The WHERE clause becomes a list of filters that the relation pushes down into
the remote SELECT, so anything parsed here must be expressible there.
"""

import re
from typing import List, Optional

from s3select.sql.ast_nodes import And, Condition, Filter, Not, Or, SelectStatement


class SQLParseError(Exception):
    """Raised when SQL parsing fails"""

    pass


_TOKEN_PATTERN = re.compile(
    r"""
    '(?:[^']|'')*'          # single quoted string, '' escapes a quote
    | "[^"]*"               # double quoted identifier or path
    | >= | <= | != | <>     # two character operators
    | [=<>(),]              # single character punctuation
    | [^\s=<>!(),]+         # words, numbers, unquoted paths and *
    """,
    re.VERBOSE,
)

_CLAUSE_KEYWORDS = ("WHERE", "LIMIT")


class SQLParser:
    """
    Simple recursive descent parser for SQL

    Grammar (simplified):
        SELECT_STMT := SELECT columns FROM source [alias] [WHERE expr] [LIMIT n]
        columns     := * | column_name [, column_name]*
        expr        := and_expr [OR and_expr]*
        and_expr    := not_expr [AND not_expr]*
        not_expr    := NOT not_expr | ( expr ) | predicate
        predicate   := column_name operator value
                     | column_name [NOT] IN ( value [, value]* )
                     | column_name [NOT] LIKE string
                     | column_name IS [NOT] NULL
    """

    def __init__(self, sql: str):
        self.sql = sql.strip()
        self.tokens = self._tokenize(self.sql)
        self.pos = 0

    def _tokenize(self, sql: str) -> List[str]:
        """Split SQL into tokens, keeping quoted strings intact"""
        tokens = []
        pos = 0
        while pos < len(sql):
            if sql[pos].isspace():
                pos += 1
                continue
            match = _TOKEN_PATTERN.match(sql, pos)
            if not match:
                raise SQLParseError(f"Unexpected character '{sql[pos]}' at offset {pos}")
            tokens.append(match.group(0))
            pos = match.end()
        return tokens

    def current(self) -> Optional[str]:
        """Get current token without advancing"""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def peek(self, offset: int = 1) -> Optional[str]:
        """Look ahead at token"""
        pos = self.pos + offset
        if pos < len(self.tokens):
            return self.tokens[pos]
        return None

    def _at_keyword(self, *keywords: str) -> bool:
        token = self.current()
        return token is not None and token.upper() in keywords

    def consume(self, expected: Optional[str] = None) -> str:
        """
        Consume and return current token, optionally checking it matches expected

        Args:
            expected: If provided, raises SQLParseError if current token doesn't match

        Returns:
            The consumed token

        Raises:
            SQLParseError: If expected token doesn't match or no more tokens
        """
        if self.pos >= len(self.tokens):
            raise SQLParseError(f"Unexpected end of query. Expected: {expected}")

        token = self.tokens[self.pos]

        if expected and token.upper() != expected.upper():
            raise SQLParseError(
                f"Expected '{expected}' but got '{token}' at position {self.pos}"
            )

        self.pos += 1
        return token

    def parse(self) -> SelectStatement:
        """Parse SQL query into AST"""
        statement = self._parse_select()
        if self.current() is not None:
            raise SQLParseError(f"Unexpected token '{self.current()}' at position {self.pos}")
        return statement

    def _parse_select(self) -> SelectStatement:
        """Parse SELECT statement"""
        self.consume("SELECT")

        columns = self._parse_columns()

        self.consume("FROM")
        source = self._unquote(self.consume())

        # Skip optional alias (FROM 's3://b/p' AS s or FROM 's3://b/p' s)
        if self._at_keyword("AS"):
            self.consume("AS")
            self.consume()
        elif self.current() is not None and not self._at_keyword(*_CLAUSE_KEYWORDS):
            self.consume()

        where: List[Filter] = []
        if self._at_keyword("WHERE"):
            self.consume("WHERE")
            where = self._split_conjunction(self._parse_expression())

        limit = None
        if self._at_keyword("LIMIT"):
            limit = self._parse_limit()

        return SelectStatement(columns=columns, source=source, where=where, limit=limit)

    def _parse_columns(self) -> List[str]:
        """
        Parse column list

        Examples:
            *
            name, age
            s."name", s.age
        """
        if self.current() == "*":
            self.consume()
            return ["*"]

        columns = []
        while True:
            columns.append(self._parse_column_name(self.consume()))

            if self.current() == ",":
                self.consume(",")
            else:
                break

        return columns

    def _parse_column_name(self, token: str) -> str:
        """Strip alias qualification and quoting from a column reference"""
        if token.upper() in ("FROM", "WHERE", "AND", "OR", "NOT") or token in (",", "(", ")"):
            raise SQLParseError(f"Expected column name but got '{token}'")
        # s.name or s."name" -> name
        if "." in token and not token.startswith('"'):
            token = token.split(".", 1)[1]
        return token.strip('"')

    def _parse_expression(self) -> Filter:
        """Parse OR-separated expression"""
        filters = [self._parse_and()]
        while self._at_keyword("OR"):
            self.consume("OR")
            filters.append(self._parse_and())
        return filters[0] if len(filters) == 1 else Or(filters)

    def _parse_and(self) -> Filter:
        """Parse AND-separated expression"""
        filters = [self._parse_not()]
        while self._at_keyword("AND"):
            self.consume("AND")
            filters.append(self._parse_not())
        return filters[0] if len(filters) == 1 else And(filters)

    def _parse_not(self) -> Filter:
        """Parse NOT, parentheses or a single predicate"""
        if self._at_keyword("NOT"):
            self.consume("NOT")
            return Not(self._parse_not())

        if self.current() == "(":
            self.consume("(")
            expression = self._parse_expression()
            self.consume(")")
            return expression

        return self._parse_condition()

    def _parse_condition(self) -> Filter:
        """
        Parse a single condition

        Examples:
            age > 25
            name = 'Alice'
            city IN ('NYC', 'LA')
            email IS NOT NULL
        """
        column = self._parse_column_name(self.consume())

        if self._at_keyword("IS"):
            self.consume("IS")
            if self._at_keyword("NOT"):
                self.consume("NOT")
                self.consume("NULL")
                return Condition(column=column, operator="IS NOT NULL")
            self.consume("NULL")
            return Condition(column=column, operator="IS NULL")

        negated = False
        if self._at_keyword("NOT"):
            self.consume("NOT")
            negated = True
            if not self._at_keyword("IN", "LIKE"):
                raise SQLParseError(f"Expected IN or LIKE after NOT, got '{self.current()}'")

        if self._at_keyword("IN"):
            self.consume("IN")
            condition = Condition(column=column, operator="IN", value=self._parse_value_list())
        elif self._at_keyword("LIKE"):
            self.consume("LIKE")
            pattern = self._parse_value(self.consume())
            if not isinstance(pattern, str):
                raise SQLParseError(f"LIKE pattern must be a string, got {pattern!r}")
            condition = Condition(column=column, operator="LIKE", value=pattern)
        else:
            operator = self.consume()
            valid_operators = {"=", ">", "<", ">=", "<=", "!=", "<>"}
            if operator not in valid_operators:
                raise SQLParseError(f"Invalid operator: {operator}")

            # Normalize <> to !=
            if operator == "<>":
                operator = "!="

            value = self._parse_value(self.consume())
            condition = Condition(column=column, operator=operator, value=value)

        return Not(condition) if negated else condition

    def _parse_value_list(self) -> list:
        """Parse a parenthesised, comma-separated list of values"""
        self.consume("(")
        values = [self._parse_value(self.consume())]
        while self.current() == ",":
            self.consume(",")
            values.append(self._parse_value(self.consume()))
        self.consume(")")
        return values

    def _parse_value(self, token: str):
        """
        Parse a value token into appropriate Python type

        Examples:
            '123' -> 123 (int)
            '3.14' -> 3.14 (float)
            "'Alice'" -> 'Alice' (string, quotes removed)
            'TRUE' -> True (bool)
        """
        if token.startswith("'") and token.endswith("'") and len(token) >= 2:
            return token[1:-1].replace("''", "'")

        if token.upper() in ("TRUE", "FALSE"):
            return token.upper() == "TRUE"

        try:
            if "." not in token and "e" not in token.lower():
                return int(token)
            return float(token)
        except ValueError:
            raise SQLParseError(f"Invalid literal: {token}")

    def _unquote(self, token: str) -> str:
        """Remove surrounding quotes from a location"""
        if (token.startswith("'") and token.endswith("'")) or (
            token.startswith('"') and token.endswith('"')
        ):
            return token[1:-1]
        return token

    def _parse_limit(self) -> int:
        """Parse LIMIT clause"""
        self.consume("LIMIT")
        limit_str = self.consume()

        try:
            limit = int(limit_str)
        except ValueError:
            raise SQLParseError(f"LIMIT must be an integer, got '{limit_str}'")
        if limit < 0:
            raise SQLParseError(f"LIMIT must be non-negative, got {limit}")
        return limit

    @staticmethod
    def _split_conjunction(expression: Filter) -> List[Filter]:
        """Flatten a top-level AND into the filter list a scan expects"""
        if isinstance(expression, And):
            return list(expression.filters)
        return [expression]


def parse(sql: str) -> SelectStatement:
    """
    Convenience function to parse SQL query

    Args:
        sql: SQL query string

    Returns:
        Parsed SelectStatement AST

    Raises:
        SQLParseError: If query is invalid

    Examples:
        >>> ast = parse("SELECT * FROM 's3://bucket/data/*'")
        >>> ast = parse("SELECT name, age FROM 's3://bucket/users/' WHERE age > 25 LIMIT 10")
    """
    parser = SQLParser(sql)
    return parser.parse()
