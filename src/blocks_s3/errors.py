"""
Block store error classes.

Provides a clear taxonomy of errors raised by the S3 block store. Backend
failures (botocore ``ClientError``) are not wrapped and propagate to the
caller unchanged.
"""
from __future__ import annotations

from typing import Iterable, Optional


class BlockStoreError(Exception):
    """
    Base class for all block store errors.
    """
    pass


class ConfigurationError(BlockStoreError, ValueError):
    """
    Store configuration is invalid.

    Raised when:
    - Bucket name is missing or blank
    - Region selector is not in the supported set
    - Server-side encryption selector is not in the supported set
    - Credential map is malformed
    """

    def __init__(self, message: str, value: object = None, supported: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.value = value
        self.supported = tuple(supported) if supported is not None else None


class InvalidBlockKey(BlockStoreError, ValueError):
    """
    Object key is not a block key.

    Raised when:
    - The key remainder after the prefix is empty
    - The key remainder is not hexadecimal
    """

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key


class BlockNotFoundError(BlockStoreError):
    """
    Block is not stored.

    Never raised by store operations, which report absence with None or
    False. Raised by the command line layer so absence maps to an exit code.
    """

    def __init__(self, message: str, block_id: Optional[str] = None):
        super().__init__(message)
        self.block_id = block_id


class KeyPrefixMismatch(InvalidBlockKey):
    """
    Object key does not live under the store prefix.
    """

    def __init__(self, message: str, key: Optional[str] = None, prefix: Optional[str] = None):
        super().__init__(message, key=key)
        self.prefix = prefix


__all__ = [
    "BlockStoreError",
    "BlockNotFoundError",
    "ConfigurationError",
    "InvalidBlockKey",
    "KeyPrefixMismatch",
]
