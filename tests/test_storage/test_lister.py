"""Tests for object listing"""

import pytest
from botocore.exceptions import EndpointConnectionError

from s3select.core.errors import ListError
from s3select.storage.lister import PAGE_SIZE, ObjectLister


def _objects(count, prefix="data/"):
    return {f"{prefix}part-{i:05d}": "" for i in range(count)}


@pytest.mark.parametrize("count, pages", [(0, 1), (1, 1), (1000, 1), (1001, 2), (2500, 3)])
def test_pagination(fake_s3, count, pages):
    client = fake_s3(_objects(count))
    keys = list(ObjectLister(client).list("bucket", "data/"))

    assert len(keys) == count
    assert len(set(keys)) == count
    assert keys == sorted(_objects(count))
    assert len(client.list_calls) == pages
    assert all(call["MaxKeys"] == PAGE_SIZE for call in client.list_calls)


def test_continuation_tokens_forwarded(fake_s3):
    client = fake_s3(_objects(5))
    list(ObjectLister(client, page_size=2).list("bucket", "data/"))

    assert [call["ContinuationToken"] for call in client.list_calls] == [None, "2", "4"]


def test_prefix_used_verbatim(fake_s3):
    client = fake_s3({**_objects(2, "logs/2024/"), **_objects(3, "logs/2023/")})
    keys = list(ObjectLister(client).list("bucket", "logs/2024/"))

    assert keys == ["logs/2024/part-00000", "logs/2024/part-00001"]
    assert client.list_calls[0]["Prefix"] == "logs/2024/"


def test_pages_fetched_lazily(fake_s3):
    client = fake_s3(_objects(5))
    keys = ObjectLister(client, page_size=2).list("bucket", "data/")

    assert next(keys) == "data/part-00000"
    assert len(client.list_calls) == 1


def test_truncated_without_token_stops():
    class Client:
        calls = 0

        def list_objects_v2(self, **request):
            Client.calls += 1
            return {"IsTruncated": True, "Contents": [{"Key": "a"}]}

    assert list(ObjectLister(Client()).list("bucket", "")) == ["a"]
    assert Client.calls == 1


def test_client_error(fake_s3, client_error):
    client = fake_s3()

    def fail(**request):
        raise client_error("AccessDenied", "ListObjectsV2")

    client.list_objects_v2 = fail

    with pytest.raises(ListError, match="Failed to list s3://bucket/data/") as excinfo:
        list(ObjectLister(client).list("bucket", "data/"))

    assert excinfo.value.bucket == "bucket"
    assert "AccessDenied" in str(excinfo.value)


def test_connection_error(fake_s3):
    client = fake_s3()

    def fail(**request):
        raise EndpointConnectionError(endpoint_url="https://s3.amazonaws.com")

    client.list_objects_v2 = fail

    with pytest.raises(ListError):
        list(ObjectLister(client).list("bucket", ""))
