"""
Storage interfaces for the S3 block store.

These types define the boundary between block store callers and the storage
implementation, enabling clean dependency injection and testing with fakes.
"""
from __future__ import annotations

import hashlib
import io
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import IO, Callable, Dict, Iterator, Optional, Protocol, Union, runtime_checkable

from ..multihash import SHA2_256, Multihash

__all__ = [
    "Block",
    "BlockStat",
    "BlockStore",
    "ContentSource",
    "LazyBlock",
    "UploadMetadata",
    "MetadataHook",
    "Bound",
]

# Listing bounds may be given as hex strings or ids
Bound = Union[str, Multihash]

CHUNK_SIZE = 1024 * 1024  # 1 MiB


@dataclass(frozen=True)
class BlockStat:
    """
    Metadata about a stored block.

    Invariants:
    - size: exact byte length (>= 0)
    - source: s3:// URI of the backing object
    - metadata: origin headers from a metadata fetch; empty for listing entries
    """
    id: Multihash
    size: int
    stored_at: datetime
    source: str
    metadata: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.size < 0:
            raise ValueError("size must be non-negative")


class ContentSource(Protocol):
    """Capability to open block content. Every call opens a new stream."""

    def read_all(self) -> IO[bytes]:
        ...

    def read_range(self, start: int, end: int) -> IO[bytes]:
        ...


@dataclass(frozen=True)
class LazyBlock:
    """
    Block handle that defers content transfer until opened.

    The store holds no stream state; whoever calls ``open`` owns the returned
    stream and must close it.
    """
    id: Multihash
    size: int
    stored_at: datetime
    source: str
    metadata: Dict[str, str]
    content: ContentSource = field(repr=False, compare=False)

    @classmethod
    def from_stat(cls, stat: BlockStat, content: ContentSource) -> LazyBlock:
        return cls(
            id=stat.id,
            size=stat.size,
            stored_at=stat.stored_at,
            source=stat.source,
            metadata=dict(stat.metadata),
            content=content,
        )

    @property
    def stat(self) -> BlockStat:
        return BlockStat(
            id=self.id,
            size=self.size,
            stored_at=self.stored_at,
            source=self.source,
            metadata=dict(self.metadata),
        )

    def open(self, start: Optional[int] = None, end: Optional[int] = None) -> IO[bytes]:
        """
        Open a stream over the block content.

        Args:
            start: First byte offset (inclusive); defaults to 0
            end: Last byte offset (exclusive); defaults to the block size

        Returns:
            A new stream; the caller must close it
        """
        if start is None and end is None:
            return self.content.read_all()
        return self.content.read_range(start or 0, self.size if end is None else end)


@dataclass(frozen=True)
class Block:
    """
    Block to be stored.

    The id is trusted: the store never re-hashes content before upload.
    """
    id: Multihash
    size: int
    opener: Callable[[], IO[bytes]] = field(repr=False, compare=False)

    def open(self) -> IO[bytes]:
        return self.opener()

    @classmethod
    def from_bytes(cls, data: bytes) -> Block:
        """Build a block from in-memory bytes, identified by sha2-256."""
        data = bytes(data)
        return cls(id=Multihash.sha2_256(data), size=len(data), opener=lambda: io.BytesIO(data))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> Block:
        """Build a block from a file, identified by sha2-256 of its content."""
        path = Path(path)
        hash_obj = hashlib.sha256()
        size = 0
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                hash_obj.update(chunk)
                size += len(chunk)
        return cls(
            id=Multihash(code=SHA2_256, digest=hash_obj.digest()),
            size=size,
            opener=lambda: open(path, "rb"),
        )


@dataclass
class UploadMetadata:
    """
    Parameters for an upload, mutable until the put is sent.

    Attributes:
        content_length: Exact byte length of the upload
        server_side_encryption: S3 SSE algorithm name (e.g. "AES256")
        user_metadata: x-amz-meta-* headers
        extra: Additional put_object parameters (ContentType, CacheControl, ...)
    """
    content_length: int
    server_side_encryption: Optional[str] = None
    user_metadata: Dict[str, str] = field(default_factory=dict)
    extra: Dict[str, object] = field(default_factory=dict)

    def to_params(self) -> Dict[str, object]:
        """Render as keyword arguments for ``put_object``."""
        params: Dict[str, object] = dict(self.extra)
        params["ContentLength"] = self.content_length
        if self.server_side_encryption:
            params["ServerSideEncryption"] = self.server_side_encryption
        if self.user_metadata:
            params["Metadata"] = dict(self.user_metadata)
        return params


# Receives the upload metadata; returns replacement metadata, or None after mutating in place
MetadataHook = Callable[[UploadMetadata], Optional[UploadMetadata]]


@runtime_checkable
class BlockStore(Protocol):
    """Protocol for content-addressable block storage."""

    def stat(self, block_id: Multihash) -> Optional[BlockStat]:
        """
        Get metadata for a block without fetching content.

        Returns:
            BlockStat, or None if the block is not stored
        """
        ...

    def get(self, block_id: Multihash) -> Optional[LazyBlock]:
        """
        Get a lazy handle for a block. No content is transferred.

        Returns:
            LazyBlock, or None if the block is not stored
        """
        ...

    def put(self, block: Block) -> LazyBlock:
        """
        Store a block if it is not already present.

        Returns:
            The stored block (the existing one if already present)
        """
        ...

    def delete(self, block_id: Multihash) -> bool:
        """
        Delete a block.

        Returns:
            True if the block existed and was deleted, False otherwise
        """
        ...

    def list(
        self,
        *,
        after: Optional[Bound] = None,
        before: Optional[Bound] = None,
        limit: Optional[int] = None,
    ) -> Iterator[LazyBlock]:
        """
        Enumerate stored blocks in ascending id order.

        Args:
            after: Only ids strictly greater than this hex id
            before: Only ids strictly less than this hex id
            limit: Maximum number of blocks to yield
        """
        ...

    def erase(self) -> bool:
        """Delete everything under the store's namespace."""
        ...
