"""
Pytest configuration and shared fixtures
"""

import pytest
from botocore.exceptions import ClientError

from s3select.core.relation import Relation


class FakeEventStream:
    """Stand-in for botocore's EventStream: iterable events plus close()"""

    def __init__(self, events):
        self.events = events
        self.closed = False

    def __iter__(self):
        for event in self.events:
            if isinstance(event, Exception):
                raise event
            yield event

    def close(self):
        self.closed = True


class FakeS3Client:
    """
    In-memory S3 client for tests

    objects maps key -> the text the SELECT service would answer with for
    that object (already projected and filtered), or a list of raw events.
    Listing pages honour MaxKeys and ContinuationToken; select responses are
    cut into small chunks so lines and characters straddle chunk boundaries.
    """

    def __init__(self, objects=None, chunk_size=7):
        self.objects = dict(objects or {})
        self.chunk_size = chunk_size
        self.list_calls = []
        self.select_calls = []
        self.streams = []

    def list_objects_v2(self, Bucket, Prefix="", MaxKeys=1000, ContinuationToken=None):
        self.list_calls.append(
            {"Bucket": Bucket, "Prefix": Prefix, "MaxKeys": MaxKeys, "ContinuationToken": ContinuationToken}
        )
        keys = sorted(k for k in self.objects if k.startswith(Prefix))
        start = int(ContinuationToken) if ContinuationToken else 0
        page = keys[start : start + MaxKeys]
        truncated = start + MaxKeys < len(keys)

        response = {"KeyCount": len(page), "IsTruncated": truncated}
        if page:
            response["Contents"] = [{"Key": key, "Size": 1} for key in page]
        if truncated:
            response["NextContinuationToken"] = str(start + MaxKeys)
        return response

    def select_object_content(self, **request):
        self.select_calls.append(request)
        data = self.objects[request["Key"]]

        if isinstance(data, list):
            events = data
        else:
            payload = data.encode("utf-8")
            events = [
                {"Records": {"Payload": payload[i : i + self.chunk_size]}}
                for i in range(0, len(payload), self.chunk_size)
            ]
            events.append(
                {"Stats": {"Details": {"BytesScanned": len(payload), "BytesReturned": len(payload)}}}
            )
            events.append({"End": {}})

        stream = FakeEventStream(events)
        self.streams.append(stream)
        return {"Payload": stream}


def make_client_error(code="InternalError", operation="SelectObjectContent"):
    """Build a botocore ClientError"""
    return ClientError({"Error": {"Code": code, "Message": f"{code} raised"}}, operation)


@pytest.fixture
def client_error():
    """Factory for botocore ClientErrors: client_error("NoSuchKey")"""
    return make_client_error


@pytest.fixture
def fake_s3():
    """Factory for fake clients: fake_s3({"key": "1,alice\\n"})"""
    return FakeS3Client


@pytest.fixture
def users_client():
    """One object holding the two-row users example"""
    return FakeS3Client({"users/part-0000.parquet": "1,alice\n2,\n"})


@pytest.fixture
def users_relation(users_client):
    """Relation over the users example: id INTEGER NOT NULL, name STRING"""
    return Relation(
        "s3://bucket/users/*",
        {"format": "parquet"},
        "id INTEGER NOT NULL, name STRING",
        client=users_client,
    )
