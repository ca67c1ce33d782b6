"""
Object listing with continuation-token pagination
"""

import logging
from typing import Iterator, Optional

from botocore.exceptions import BotoCoreError, ClientError

from s3select.core.errors import ListError

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000


class ObjectLister:
    """
    Enumerate the keys under a bucket prefix

    Each call to list() starts a fresh listing, so the same lister can be
    reused across scans. Pages are fetched lazily as keys are consumed.
    """

    def __init__(self, client, page_size: int = PAGE_SIZE):
        """
        Args:
            client: S3 client exposing list_objects_v2
            page_size: Maximum keys requested per page
        """
        self.client = client
        self.page_size = page_size

    def list(self, bucket: str, prefix: str) -> Iterator[str]:
        """
        Yield every key under prefix, in the order the service returns them

        Args:
            bucket: Bucket name
            prefix: Key prefix, used verbatim

        Yields:
            Object keys

        Raises:
            ListError: If a listing request fails
        """
        token: Optional[str] = None
        page = 0

        while True:
            request = {"Bucket": bucket, "Prefix": prefix, "MaxKeys": self.page_size}
            if token:
                request["ContinuationToken"] = token

            try:
                response = self.client.list_objects_v2(**request)
            except (ClientError, BotoCoreError) as e:
                raise ListError(bucket, prefix, str(e)) from e

            contents = response.get("Contents", [])
            page += 1
            logger.debug("Listed page %d of s3://%s/%s: %d keys", page, bucket, prefix, len(contents))

            for summary in contents:
                yield summary["Key"]

            token = response.get("NextContinuationToken")
            if not response.get("IsTruncated") or not token:
                break
