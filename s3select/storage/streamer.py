"""
Streaming decode of SELECT responses

The service answers with an event stream. Records events carry chunks of the
comma-separated output; chunk boundaries fall anywhere, including inside a
line or a multi-byte character.

Field values are split on "," with no quoting or escaping. A value that
itself contains a comma shifts every following field; the relation detects
the resulting over-long records and fails the scan.
"""

import codecs
import logging
from typing import Iterator, List

from botocore.exceptions import BotoCoreError, ClientError

from s3select.core.errors import StreamError
from s3select.select.query_builder import RemoteQuery

logger = logging.getLogger(__name__)

FIELD_DELIMITER = ","
RECORD_DELIMITER = "\n"


class RowStreamer:
    """
    Execute a RemoteQuery and yield its raw records

    The response stream is closed when the records are exhausted, when
    reading fails and when the consumer stops iterating early.
    """

    def __init__(self, client):
        """
        Args:
            client: S3 client exposing select_object_content
        """
        self.client = client

    def stream(self, query: RemoteQuery) -> Iterator[List[str]]:
        """
        Yield each response line split into fields

        Args:
            query: Request for one object

        Yields:
            List of field strings per record

        Raises:
            StreamError: If the request fails, the stream breaks, or it ends
                without the service's End event
        """
        try:
            response = self.client.select_object_content(**query.to_request())
        except (ClientError, BotoCoreError) as e:
            raise StreamError(query.bucket, query.key, str(e)) from e

        payload = response["Payload"]
        try:
            yield from self._decode(payload, query)
        finally:
            payload.close()

    def _decode(self, payload, query: RemoteQuery) -> Iterator[List[str]]:
        decoder = codecs.getincrementaldecoder("utf-8")()
        buffer = ""
        finished = False

        try:
            for event in payload:
                if "Records" in event:
                    buffer += decoder.decode(event["Records"]["Payload"])
                    *lines, buffer = buffer.split(RECORD_DELIMITER)
                    for line in lines:
                        yield self._split(line)
                elif "Stats" in event:
                    details = event["Stats"].get("Details", {})
                    logger.debug(
                        "s3://%s/%s: scanned %s bytes, returned %s bytes",
                        query.bucket,
                        query.key,
                        details.get("BytesScanned"),
                        details.get("BytesReturned"),
                    )
                elif "End" in event:
                    finished = True
        except (ClientError, BotoCoreError) as e:
            raise StreamError(query.bucket, query.key, str(e)) from e
        except UnicodeDecodeError as e:
            raise StreamError(query.bucket, query.key, f"invalid UTF-8 in response: {e}") from e

        if not finished:
            raise StreamError(query.bucket, query.key, "response ended before the End event")

        try:
            buffer += decoder.decode(b"", final=True)
        except UnicodeDecodeError as e:
            raise StreamError(query.bucket, query.key, f"invalid UTF-8 in response: {e}") from e

        # A final record without a trailing record delimiter
        if buffer:
            yield self._split(buffer)

    @staticmethod
    def _split(line: str) -> List[str]:
        if line.endswith("\r"):
            line = line[:-1]
        return line.split(FIELD_DELIMITER)
