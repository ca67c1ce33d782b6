"""
Location pointers

A location names a bucket and a key prefix, optionally ending in "*" to mean
"every object under this prefix". Accepted forms:

    s3://bucket/prefix*        (also s3a:// and s3n://)
    https://endpoint/bucket/prefix*                 path-style URL
    https://bucket.s3.us-east-1.amazonaws.com/prefix*   virtual-hosted URL
"""

import re
from dataclasses import dataclass
from urllib.parse import unquote, urlparse

from s3select.core.errors import ConfigError

_BUCKET_PATTERN = re.compile(r"[a-z0-9][a-z0-9.\-]{1,61}[a-z0-9]")
_VIRTUAL_HOST_PATTERN = re.compile(r"^(?P<bucket>.+)\.s3[.\-](?:[a-z0-9\-]+\.)?amazonaws\.com$")
_S3_SCHEMES = ("s3", "s3a", "s3n")


@dataclass(frozen=True)
class Location:
    """Parsed location pointer"""

    bucket: str
    prefix: str
    uri: str

    def __repr__(self) -> str:
        return f"Location(s3://{self.bucket}/{self.prefix})"

    @classmethod
    def parse(cls, uri: str) -> "Location":
        """
        Parse a location pointer

        The key prefix is used verbatim for listing, minus one trailing "*".

        Examples:
            >>> Location.parse("s3://logs/2024/01/*")
            Location(s3://logs/2024/01/)

        Raises:
            ConfigError: If the URI is empty, uses an unknown scheme or names
                an invalid bucket
        """
        if not uri:
            raise ConfigError("Location cannot be empty")

        parsed = urlparse(uri)
        scheme = parsed.scheme.lower()

        if scheme in _S3_SCHEMES:
            bucket = parsed.netloc
            key = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
        elif scheme in ("http", "https"):
            bucket, key = cls._split_http(parsed.hostname or "", unquote(parsed.path))
        else:
            raise ConfigError(f"Unsupported location scheme in '{uri}'")

        if not _BUCKET_PATTERN.fullmatch(bucket) or ".." in bucket:
            raise ConfigError(f"Invalid bucket name '{bucket}' in '{uri}'")

        if key.endswith("*"):
            key = key[:-1]

        return cls(bucket=bucket, prefix=key, uri=uri)

    @staticmethod
    def _split_http(host: str, path: str) -> tuple[str, str]:
        """Split an HTTP(S) URL into bucket and key"""
        match = _VIRTUAL_HOST_PATTERN.match(host)
        if match:
            return match.group("bucket"), path.lstrip("/")

        # Path-style: first path segment is the bucket
        bucket, _, key = path.lstrip("/").partition("/")
        return bucket, key
