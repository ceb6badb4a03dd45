"""
Content-addressable block storage on Amazon S3.

Blocks are stored one object per block, keyed by the hex encoding of their
multihash under an optional prefix.
"""
from .errors import BlockNotFoundError, BlockStoreError, ConfigurationError, InvalidBlockKey, KeyPrefixMismatch
from .multihash import Multihash, MultihashError
from .settings import StoreSettings, create_settings_from_env
from .storage.base import Block, BlockStat, BlockStore, LazyBlock, UploadMetadata
from .storage.s3_store import S3BlockStore, erase

__version__ = "0.4.0"

__all__ = [
    "Block",
    "BlockNotFoundError",
    "BlockStat",
    "BlockStore",
    "BlockStoreError",
    "ConfigurationError",
    "InvalidBlockKey",
    "KeyPrefixMismatch",
    "LazyBlock",
    "Multihash",
    "MultihashError",
    "S3BlockStore",
    "StoreSettings",
    "UploadMetadata",
    "create_settings_from_env",
    "erase",
]
