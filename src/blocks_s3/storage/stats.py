"""
Translation from S3 responses to block stats.

Two pure functions produce the same BlockStat shape: one from a
list_objects_v2 summary entry, one from a head_object/put_object response.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from ..errors import InvalidBlockKey
from ..multihash import Multihash, MultihashError
from .base import BlockStat
from .keys import key_to_id, s3_uri

__all__ = ["summary_stat", "metadata_stat", "TRANSPORT_HEADERS"]

logger = logging.getLogger(__name__)

# Standard headers already represented by BlockStat fields
TRANSPORT_HEADERS = frozenset({"content-length", "last-modified", "accept-ranges"})


def summary_stat(bucket: str, prefix: Optional[str], summary: Mapping[str, Any]) -> Optional[BlockStat]:
    """
    Build a stat from a listing summary entry.

    Args:
        bucket: Bucket the listing came from
        prefix: Normalized store prefix, or None
        summary: One ``Contents`` entry (Key, Size, LastModified)

    Returns:
        BlockStat, or None if the key is not a block key (foreign bucket content)
    """
    object_key = summary["Key"]
    try:
        block_id = key_to_id(prefix, object_key)
    except (InvalidBlockKey, MultihashError) as e:
        logger.warning(f"Skipping non-block object {object_key} in s3://{bucket}: {e}")
        return None

    return BlockStat(
        id=block_id,
        size=summary.get("Size", 0),
        stored_at=summary.get("LastModified"),
        source=s3_uri(bucket, object_key),
    )


def metadata_stat(block_id: Multihash, bucket: str, object_key: str, response: Mapping[str, Any]) -> BlockStat:
    """
    Build a stat from an object metadata response.

    A missing LastModified is replaced by the current time. Origin metadata is
    the raw HTTP header map minus the standard transport headers.
    """
    headers = response.get("ResponseMetadata", {}).get("HTTPHeaders", {}) or {}
    origin = {
        name: value
        for name, value in headers.items()
        if name.lower() not in TRANSPORT_HEADERS
    }

    return BlockStat(
        id=block_id,
        size=response.get("ContentLength", 0),
        stored_at=response.get("LastModified") or datetime.now(timezone.utc),
        source=s3_uri(bucket, object_key),
        metadata=origin,
    )
