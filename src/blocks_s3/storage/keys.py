"""
Object key construction helpers.

Centralizes the mapping between block ids and S3 object keys. Keys are the
lowercase hex rendering of the block's multihash, under an optional prefix that
always ends in exactly one ``/``.
"""
from __future__ import annotations

import re
from typing import Optional

from ..errors import InvalidBlockKey, KeyPrefixMismatch
from ..multihash import Multihash

__all__ = ["normalize_prefix", "id_to_key", "key_to_id", "subkey", "s3_uri"]

_HEX_KEY_RE = re.compile(r"^[0-9a-fA-F]+$")


def normalize_prefix(prefix: Optional[str]) -> Optional[str]:
    """
    Normalize a key prefix.

    Trims whitespace and strips leading/trailing slashes until stable, then
    appends a single trailing slash.

    Args:
        prefix: Raw prefix, may be None

    Returns:
        Normalized prefix ending in "/", or None if nothing is left

    Examples:
        >>> normalize_prefix("/foo/bar/  ")
        'foo/bar/'
        >>> normalize_prefix("///") is None
        True
    """
    if prefix is None:
        return None

    result = prefix
    while True:
        cleaned = result.strip().strip("/")
        if cleaned == result:
            break
        result = cleaned

    if not result:
        return None
    return f"{result}/"


def id_to_key(prefix: Optional[str], block_id: Multihash) -> str:
    """Build the object key for a block id under an (already normalized) prefix."""
    return f"{prefix or ''}{block_id.hex()}"


def subkey(prefix: Optional[str], object_key: str) -> str:
    """
    Strip the prefix from an object key.

    Raises:
        KeyPrefixMismatch: If the key does not start with the prefix
    """
    if prefix and not object_key.startswith(prefix):
        raise KeyPrefixMismatch(
            f"S3 object {object_key} is not under prefix {prefix}",
            key=object_key,
            prefix=prefix,
        )
    return object_key[len(prefix):] if prefix else object_key


def key_to_id(prefix: Optional[str], object_key: str) -> Multihash:
    """
    Parse a block id out of an object key.

    Args:
        prefix: Normalized prefix, or None
        object_key: Full S3 object key

    Returns:
        Multihash encoded in the key

    Raises:
        KeyPrefixMismatch: If the key is not under the prefix
        InvalidBlockKey: If the remainder is empty or not hexadecimal
        MultihashError: If the hex does not decode to a valid multihash
    """
    block_subkey = subkey(prefix, object_key)

    if not block_subkey:
        raise InvalidBlockKey(f"Cannot parse id from empty block subkey: {object_key}", key=object_key)

    if not _HEX_KEY_RE.match(block_subkey):
        raise InvalidBlockKey(f"Block subkey {block_subkey} is not valid hexadecimal", key=object_key)

    return Multihash.from_hex(block_subkey)


def s3_uri(bucket: str, object_key: str) -> str:
    """Construct an s3:// URI referencing an object."""
    return f"s3://{bucket}/{object_key}"
