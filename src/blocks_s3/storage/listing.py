"""
Paginated listing of stored blocks.

Drives list_objects_v2 one page at a time, threading the continuation token
explicitly. Generators are lazy and one-pass: a page is requested only when the
consumer asks for an item beyond the current page, so abandoning or closing the
generator stops pagination.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Optional

from ..multihash import Multihash
from .base import BlockStat, Bound
from .stats import summary_stat

__all__ = ["list_stats", "iter_object_keys", "bound_hex", "MAX_KEYS_PER_PAGE"]

logger = logging.getLogger(__name__)

# S3 never returns more than this many keys per call
MAX_KEYS_PER_PAGE = 1000


def bound_hex(bound: Optional[Bound]) -> Optional[str]:
    """Render a listing bound (hex string or Multihash) as a hex string."""
    if bound is None:
        return None
    if isinstance(bound, Multihash):
        return bound.hex()
    return str(bound)


def list_stats(
    client: Any,
    bucket: str,
    prefix: Optional[str],
    *,
    after: Optional[Bound] = None,
    before: Optional[Bound] = None,
    limit: Optional[int] = None,
) -> Iterator[BlockStat]:
    """
    Enumerate block stats under a prefix in ascending key order.

    Args:
        client: boto3 S3 client
        bucket: Bucket name
        prefix: Normalized prefix, or None
        after: Start strictly after this hex subkey
        before: Stop at the first hex subkey not less than this
        limit: Maximum number of stats to yield

    Returns:
        Lazy generator of BlockStat

    Raises:
        ValueError: If limit is not a positive integer
    """
    if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
        raise ValueError(f"limit must be a positive integer, got {limit!r}")

    return _list_stats(
        client,
        bucket,
        prefix,
        after=bound_hex(after),
        before=bound_hex(before),
        limit=limit,
    )


def _list_stats(
    client: Any,
    bucket: str,
    prefix: Optional[str],
    *,
    after: Optional[str],
    before: Optional[str],
    limit: Optional[int],
) -> Iterator[BlockStat]:
    prefix_len = len(prefix) if prefix else 0
    remaining = limit

    params: Dict[str, Any] = {"Bucket": bucket}
    if prefix:
        params["Prefix"] = prefix
    start_after = f"{prefix or ''}{after or ''}"
    if start_after:
        params["StartAfter"] = start_after

    while True:
        if remaining is not None:
            params["MaxKeys"] = min(remaining, MAX_KEYS_PER_PAGE)

        logger.debug(f"Listing s3://{bucket}/{prefix or ''} with {_describe(params)}")
        response = client.list_objects_v2(**params)

        for summary in response.get("Contents", []):
            if before is not None and summary["Key"][prefix_len:] >= before:
                logger.debug(f"Reached listing cutoff {before}")
                return

            stat = summary_stat(bucket, prefix, summary)
            if stat is None:
                continue

            yield stat

            if remaining is not None:
                remaining -= 1
                if remaining <= 0:
                    return

        if not response.get("IsTruncated"):
            return

        params.pop("StartAfter", None)
        params["ContinuationToken"] = response["NextContinuationToken"]


def iter_object_keys(client: Any, bucket: str, prefix: Optional[str]) -> Iterator[str]:
    """
    Yield every object key under a prefix, with no block-key filtering.
    """
    params: Dict[str, Any] = {"Bucket": bucket}
    if prefix:
        params["Prefix"] = prefix

    while True:
        response = client.list_objects_v2(**params)
        for summary in response.get("Contents", []):
            yield summary["Key"]

        if not response.get("IsTruncated"):
            return
        params["ContinuationToken"] = response["NextContinuationToken"]


def _describe(params: Dict[str, Any]) -> str:
    return ", ".join(f"{k}={v}" for k, v in params.items() if k not in ("Bucket", "Prefix"))
