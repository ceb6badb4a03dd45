"""
S3 client construction.

Builds a boto3 S3 client from StoreSettings. Retries are left to botocore's
own standard retry mode.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from botocore.config import Config

from ..settings import StoreSettings
from .credentials import create_session

__all__ = ["create_s3_client"]

logger = logging.getLogger(__name__)


def create_s3_client(settings: StoreSettings) -> Any:
    """
    Create a boto3 S3 client for the configured bucket.

    Args:
        settings: Validated store settings

    Returns:
        boto3 S3 client
    """
    session = create_session(settings.credentials, region=settings.region)

    kwargs: Dict[str, Any] = {
        "config": Config(
            region_name=settings.region,
            signature_version="s3v4",
            retries={"max_attempts": settings.max_attempts, "mode": "standard"},
        ),
    }
    if settings.endpoint_url:
        kwargs["endpoint_url"] = settings.endpoint_url
        logger.debug(f"S3 client using custom endpoint: {settings.endpoint_url}")

    logger.debug(f"S3 client for bucket {settings.bucket} in region {settings.region or 'default'}")
    return session.client("s3", **kwargs)
