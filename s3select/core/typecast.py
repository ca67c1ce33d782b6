"""
Field coercion from SELECT output text to declared types

S3 Select returns every value as text. cast() turns one such value into the
Python value for its declared DataType, or raises if the text doesn't fit.
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Optional

from s3select.core.errors import ParseError, TypeMismatch
from s3select.core.types import DataType

# Signed ranges for the integral types
_INTEGRAL_RANGES = {
    DataType.BYTE: (-(2**7), 2**7 - 1),
    DataType.SHORT: (-(2**15), 2**15 - 1),
    DataType.INTEGER: (-(2**31), 2**31 - 1),
    DataType.LONG: (-(2**63), 2**63 - 1),
}

_INTEGER_PATTERN = re.compile(r"(?P<sign>[+-]?)0*(?P<digits>[0-9]+)")

# 2**63 has 19 digits; longer runs are out of range for every integral type
_MAX_INTEGRAL_DIGITS = 19

_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_TIMESTAMP_PATTERN = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}[ T][0-9]{2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]{1,6})?(?:[+-][0-9]{2}:?[0-9]{2})?"
)

_TIMESTAMP_FORMATS = [
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S%z",
    "%Y-%m-%d %H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f%z",
]


def cast(value: Optional[str], dtype: DataType, nullable: bool = True) -> Any:
    """
    Convert a textual field value to its declared type

    Args:
        value: Field text from a decoded record, or None if the record was short
        dtype: Declared type of the field
        nullable: Whether the field accepts NULL

    Returns:
        Typed Python value, or None for an empty value of a nullable field

    Raises:
        TypeMismatch: Empty or missing value for a non-nullable field
        ParseError: Text doesn't conform to the type's format

    Examples:
        >>> cast("42", DataType.INTEGER)
        42
        >>> cast("", DataType.STRING)
        None
        >>> cast("TRUE", DataType.BOOLEAN, nullable=False)
        True
    """
    if value is None or value == "":
        if nullable:
            return None
        raise TypeMismatch(value, dtype, f"NULL value for non-nullable {dtype} field")

    try:
        converter = _CONVERTERS[dtype]
    except KeyError:
        raise ParseError(value, dtype, f"Unsupported type: {dtype}")

    return converter(value, dtype)


def _to_integral(value: str, dtype: DataType) -> int:
    match = _INTEGER_PATTERN.fullmatch(value)
    if not match:
        raise ParseError(value, dtype, f"Cannot parse '{value}' as {dtype}")
    digits = match.group("digits")
    if len(digits) > _MAX_INTEGRAL_DIGITS:
        raise ParseError(value, dtype, f"Value '{value}' out of range for {dtype}")
    result = int(match.group("sign") + digits, 10)

    low, high = _INTEGRAL_RANGES[dtype]
    if not low <= result <= high:
        raise ParseError(value, dtype, f"Value '{value}' out of range for {dtype}")
    return result


def _to_float(value: str, dtype: DataType) -> float:
    # float() tolerates surrounding whitespace and digit separators; the wire format doesn't
    if "_" in value or value != value.strip():
        raise ParseError(value, dtype, f"Cannot parse '{value}' as {dtype}")
    try:
        return float(value)
    except ValueError:
        raise ParseError(value, dtype, f"Cannot parse '{value}' as {dtype}")


def _to_decimal(value: str, dtype: DataType) -> Decimal:
    # Same textual rules as _to_float
    if "_" in value or value != value.strip():
        raise ParseError(value, dtype, f"Cannot parse '{value}' as {dtype}")
    try:
        result = Decimal(value)
    except InvalidOperation:
        raise ParseError(value, dtype, f"Cannot parse '{value}' as {dtype}")

    if not result.is_finite():
        raise ParseError(value, dtype, f"Non-finite value '{value}' for {dtype}")
    return result


def _to_boolean(value: str, dtype: DataType) -> bool:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ParseError(value, dtype, f"Cannot parse '{value}' as {dtype}")


def _to_date(value: str, dtype: DataType) -> date:
    # strptime alone accepts unpadded months and days
    if not _DATE_PATTERN.fullmatch(value):
        raise ParseError(value, dtype, f"Cannot parse '{value}' as {dtype} (expected YYYY-MM-DD)")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ParseError(value, dtype, f"Cannot parse '{value}' as {dtype} (expected YYYY-MM-DD)")


def _to_timestamp(value: str, dtype: DataType) -> datetime:
    # strptime's %z doesn't accept a bare 'Z' on older interpreters
    text = value[:-1] + "+0000" if value.endswith("Z") else value
    if _TIMESTAMP_PATTERN.fullmatch(text):
        for fmt in _TIMESTAMP_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue

    raise ParseError(
        value, dtype, f"Cannot parse '{value}' as {dtype} (expected YYYY-MM-DD HH:MM:SS[.ffffff])"
    )


def _to_string(value: str, dtype: DataType) -> str:
    return value


_CONVERTERS: Dict[DataType, Callable[[str, DataType], Any]] = {
    DataType.STRING: _to_string,
    DataType.BYTE: _to_integral,
    DataType.SHORT: _to_integral,
    DataType.INTEGER: _to_integral,
    DataType.LONG: _to_integral,
    DataType.FLOAT: _to_float,
    DataType.DOUBLE: _to_float,
    DataType.DECIMAL: _to_decimal,
    DataType.BOOLEAN: _to_boolean,
    DataType.DATE: _to_date,
    DataType.TIMESTAMP: _to_timestamp,
}
