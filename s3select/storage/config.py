"""
Storage configuration

Connection settings for the object store. Settings come from a Hadoop-style
mapping (the fs.s3a.* keys Spark users already have), from short keys, or
from the environment.
"""

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from s3select.core.errors import ConfigError

DEFAULT_ENDPOINT = "https://s3.amazonaws.com"
DEFAULT_REGION = "us-east-1"

# Hadoop-style option names and the StorageConfig attribute they set
_HADOOP_KEYS = {
    "fs.s3a.path.style.access": "path_style_access",
    "fs.s3a.endpoint": "endpoint",
    "fs.s3a.region": "region",
    "fs.s3a.access.key": "access_key",
    "fs.s3a.secret.key": "secret_key",
    "fs.s3a.server-side-encryption-algorithm": "sse_algorithm",
    "fs.s3a.server-side-encryption.key": "sse_key",
}


@dataclass(frozen=True)
class StorageConfig:
    """
    Settings used to build the storage client and each SELECT request

    Attributes:
        path_style_access: Address buckets as endpoint/bucket instead of bucket.endpoint
        endpoint: Service endpoint URL
        region: Signing region
        access_key: Explicit access key; None uses boto3's credential chain
        secret_key: Secret for access_key
        sse_algorithm: "SSE-C" to send a customer-provided encryption key
        sse_key: Base64 encoded customer key for SSE-C
    """

    path_style_access: bool = False
    endpoint: str = DEFAULT_ENDPOINT
    region: str = DEFAULT_REGION
    access_key: Optional[str] = None
    secret_key: Optional[str] = None
    sse_algorithm: Optional[str] = None
    sse_key: Optional[str] = None

    def __post_init__(self):
        if (self.access_key is None) != (self.secret_key is None):
            raise ConfigError("access_key and secret_key must be set together")
        if self.sse_algorithm is not None and self.sse_algorithm.upper() != "SSE-C":
            raise ConfigError(f"Unsupported server-side encryption: {self.sse_algorithm}")
        if self.sse_algorithm is not None and not self.sse_key:
            raise ConfigError("SSE-C requires a customer key")

    @property
    def uses_customer_key(self) -> bool:
        return self.sse_algorithm is not None

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "StorageConfig":
        """
        Build a config from option names and values

        Recognises the fs.s3a.* Hadoop keys and the attribute names themselves
        (path_style_access, endpoint, region, ...). Unknown keys are ignored.

        Example:
            >>> StorageConfig.from_mapping({"fs.s3a.endpoint": "http://localhost:9000",
            ...                             "fs.s3a.path.style.access": "true"})
        """
        values = {}
        for key, value in options.items():
            attr = _HADOOP_KEYS.get(key, key)
            if attr in cls.__dataclass_fields__ and value is not None:
                values[attr] = value

        if "path_style_access" in values:
            values["path_style_access"] = _to_bool(values["path_style_access"], "path_style_access")

        return cls(**values)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StorageConfig":
        """
        Build a config from environment variables

        Reads AWS_ENDPOINT_URL, AWS_REGION (or AWS_DEFAULT_REGION) and
        S3SELECT_PATH_STYLE_ACCESS. Credentials are left to boto3.
        """
        environ = os.environ if environ is None else environ
        options = {}
        if environ.get("AWS_ENDPOINT_URL"):
            options["endpoint"] = environ["AWS_ENDPOINT_URL"]
        region = environ.get("AWS_REGION") or environ.get("AWS_DEFAULT_REGION")
        if region:
            options["region"] = region
        if environ.get("S3SELECT_PATH_STYLE_ACCESS"):
            options["path_style_access"] = environ["S3SELECT_PATH_STYLE_ACCESS"]
        return cls.from_mapping(options)


def _to_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "1", "yes"):
        return True
    if text in ("false", "0", "no", ""):
        return False
    raise ConfigError(f"Invalid boolean for {name}: {value!r}")
