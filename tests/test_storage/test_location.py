"""Tests for location pointer parsing"""

import pytest

from s3select.core.errors import ConfigError
from s3select.storage.location import Location


@pytest.mark.parametrize(
    "uri, bucket, prefix",
    [
        ("s3://bucket/users/*", "bucket", "users/"),
        ("s3a://bucket/users/part-", "bucket", "users/part-"),
        ("s3n://bucket/a/b/c*", "bucket", "a/b/c"),
        ("s3://bucket", "bucket", ""),
        ("s3://bucket/*", "bucket", ""),
        ("s3://bucket/x**", "bucket", "x*"),
        ("http://localhost:9000/data/events/*", "data", "events/"),
        ("https://my-bucket.s3.us-west-2.amazonaws.com/logs/2024/*", "my-bucket", "logs/2024/"),
        ("https://my.bucket.s3.amazonaws.com/k", "my.bucket", "k"),
        ("https://s3.amazonaws.com/my-bucket/with%20space", "my-bucket", "with space"),
    ],
)
def test_parse(uri, bucket, prefix):
    location = Location.parse(uri)

    assert location.bucket == bucket
    assert location.prefix == prefix
    assert location.uri == uri


@pytest.mark.parametrize(
    "uri, message",
    [
        ("", "cannot be empty"),
        ("gs://bucket/p", "Unsupported location scheme"),
        ("/local/path", "Unsupported location scheme"),
        ("s3://Bad_Bucket/p", "Invalid bucket name"),
        ("s3://ab/p", "Invalid bucket name"),
        ("s3://a..b/p", "Invalid bucket name"),
        ("s3:///p", "Invalid bucket name"),
    ],
)
def test_invalid(uri, message):
    with pytest.raises(ConfigError, match=message):
        Location.parse(uri)


def test_repr():
    assert repr(Location.parse("s3://logs/2024/01/*")) == "Location(s3://logs/2024/01/)"
