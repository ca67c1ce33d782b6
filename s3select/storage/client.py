"""
Storage client construction

Builds the boto3 S3 client a relation talks to. Anything exposing
list_objects_v2 and select_object_content with boto3's signatures can be
passed to a Relation instead.
"""

import logging

import boto3
from botocore.config import Config as BotoConfig

from s3select.storage.config import StorageConfig

logger = logging.getLogger(__name__)


def create_client(config: StorageConfig):
    """
    Create an S3 client for the configured endpoint

    Explicit keys in the config take precedence; otherwise boto3 resolves
    credentials from its default chain (environment, profile, instance role).

    Args:
        config: Storage settings

    Returns:
        boto3 S3 client
    """
    addressing_style = "path" if config.path_style_access else "auto"
    boto_config = BotoConfig(
        region_name=config.region,
        s3={"addressing_style": addressing_style},
        # Retries belong to the caller; a scan fails on the first error
        retries={"max_attempts": 1, "mode": "standard"},
    )

    kwargs = {
        "endpoint_url": config.endpoint,
        "region_name": config.region,
        "config": boto_config,
    }
    if config.access_key is not None:
        kwargs["aws_access_key_id"] = config.access_key
        kwargs["aws_secret_access_key"] = config.secret_key

    logger.debug(
        "Creating S3 client for %s (region=%s, addressing=%s)",
        config.endpoint,
        config.region,
        addressing_style,
    )
    session = boto3.Session(region_name=config.region)
    return session.client("s3", **kwargs)
