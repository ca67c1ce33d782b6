"""
Exception hierarchy for s3select

Every error raised by a scan derives from S3SelectError. None of them are
retried inside the package; a failed scan surfaces exactly one of these.
"""

from typing import Any, Optional


class S3SelectError(Exception):
    """Base class for all s3select errors"""

    pass


class ConfigError(S3SelectError):
    """Missing or invalid schema, location, scan parameter or storage setting"""

    pass


class UnknownColumn(S3SelectError, LookupError):
    """A requested column does not exist in the declared schema"""

    def __init__(self, column: str, available: list[str]):
        self.column = column
        self.available = available
        super().__init__(
            f"Column '{column}' not found in schema. "
            f"Available columns: {', '.join(available)}"
        )


class QueryTranslationError(S3SelectError):
    """A filter cannot be expressed in the remote SELECT dialect"""

    def __init__(self, message: str, filter: Any = None):
        self.filter = filter
        if filter is not None:
            message = f"{message}: {filter!r}"
        super().__init__(message)


class ListError(S3SelectError):
    """Listing objects under a prefix failed"""

    def __init__(self, bucket: str, prefix: str, reason: str):
        self.bucket = bucket
        self.prefix = prefix
        super().__init__(f"Failed to list s3://{bucket}/{prefix}: {reason}")


class StreamError(S3SelectError):
    """The SELECT request or its response stream failed for one object"""

    def __init__(self, bucket: str, key: str, reason: str):
        self.bucket = bucket
        self.key = key
        super().__init__(f"Failed to read s3://{bucket}/{key}: {reason}")


class CastError(S3SelectError, ValueError):
    """
    Base class for field coercion failures

    TypeCast only knows the value and the target type. The relation fills in
    where the value came from (object key, line number, field name) before
    the error propagates.
    """

    def __init__(self, value: Optional[str], dtype: Any, reason: str):
        self.value = value
        self.dtype = dtype
        self.reason = reason
        self.field: Optional[str] = None
        self.key: Optional[str] = None
        self.line: Optional[int] = None
        super().__init__(reason)

    def locate(self, key: str, line: int, field: Optional[str] = None) -> "CastError":
        """Attach the record position to this error and return it"""
        self.key = key
        self.line = line
        self.field = field
        return self

    def __str__(self) -> str:
        parts = [self.reason]
        if self.field is not None:
            parts.append(f"field '{self.field}'")
        if self.key is not None:
            parts.append(f"object '{self.key}' line {self.line}")
        return ", ".join(parts)


class ParseError(CastError):
    """Text does not conform to the target type's format"""

    pass


class TypeMismatch(CastError):
    """Empty or missing value for a non-nullable field"""

    pass
