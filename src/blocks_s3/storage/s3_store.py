"""
Block store backed by a bucket in Amazon S3.

Each block is one object, keyed by the hex encoding of its multihash under an
optional prefix. Implements the BlockStore protocol on top of a boto3 S3
client; any S3-compatible service works with an endpoint override.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterator, Optional

from botocore.exceptions import ClientError

from ..errors import ConfigurationError
from ..multihash import Multihash
from ..settings import StoreSettings, validate_sse
from .base import Block, BlockStat, BlockStore, Bound, LazyBlock, MetadataHook, UploadMetadata
from .client import create_s3_client
from .content import ContentReader
from .keys import id_to_key, normalize_prefix
from .listing import iter_object_keys, list_stats
from .stats import metadata_stat

__all__ = ["S3BlockStore", "erase", "is_not_found"]

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def is_not_found(error: ClientError) -> bool:
    """Check whether a botocore ClientError is a missing-object response."""
    code = str(error.response.get("Error", {}).get("Code", ""))
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return code in _NOT_FOUND_CODES or status == 404


class S3BlockStore(BlockStore):
    """
    BlockStore adapter for Amazon S3.

    Holds only immutable configuration (client, bucket, prefix, encryption
    algorithm, metadata hook); every operation is independent and may run on
    any thread.

    Args:
        client: boto3 S3 client
        bucket: Bucket name (non-empty after trimming)
        prefix: Key prefix, normalized to end in a single "/"
        sse: Server-side encryption selector (e.g. "aes-256")
        metadata_hook: Called with the upload metadata before each upload;
            returns the metadata to send, or None after mutating it in place

    Raises:
        ConfigurationError: If bucket or sse are invalid
    """

    def __init__(
        self,
        client: Any,
        bucket: str,
        *,
        prefix: Optional[str] = None,
        sse: Optional[str] = None,
        metadata_hook: Optional[MetadataHook] = None,
    ) -> None:
        if not isinstance(bucket, str) or not bucket.strip():
            raise ConfigurationError(f"Bucket name must be a non-empty string, got: {bucket!r}", value=bucket)

        self._client = client
        self._bucket = bucket.strip()
        self._prefix = normalize_prefix(prefix)
        self._sse_algorithm = validate_sse(sse)
        self._metadata_hook = metadata_hook

        logger.debug(f"S3 block store at s3://{self._bucket}/{self._prefix or ''}")

    @classmethod
    def from_settings(cls, settings: StoreSettings, *, client: Any = None,
                      metadata_hook: Optional[MetadataHook] = None) -> S3BlockStore:
        """
        Create a store from settings, building a boto3 client unless one is given.
        """
        if client is None:
            client = create_s3_client(settings)
        return cls(
            client,
            settings.bucket,
            prefix=settings.prefix,
            sse=settings.sse,
            metadata_hook=metadata_hook,
        )

    @property
    def client(self) -> Any:
        return self._client

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def prefix(self) -> Optional[str]:
        return self._prefix

    @property
    def sse_algorithm(self) -> Optional[str]:
        return self._sse_algorithm

    def key_for(self, block_id: Multihash) -> str:
        """Object key for a block id."""
        return id_to_key(self._prefix, block_id)

    def _lazy_block(self, stat: BlockStat) -> LazyBlock:
        reader = ContentReader(self._client, self._bucket, self.key_for(stat.id))
        return LazyBlock.from_stat(stat, reader)

    def stat(self, block_id: Multihash) -> Optional[BlockStat]:
        """
        Get block metadata with a HEAD request.

        Returns:
            BlockStat, or None if the object does not exist

        Raises:
            ClientError: For any backend error other than not-found
        """
        object_key = self.key_for(block_id)
        try:
            response = self._client.head_object(Bucket=self._bucket, Key=object_key)
        except ClientError as e:
            if is_not_found(e):
                return None
            raise
        return metadata_stat(block_id, self._bucket, object_key, response)

    def get(self, block_id: Multihash) -> Optional[LazyBlock]:
        """Get a lazy block; no content is transferred."""
        stat = self.stat(block_id)
        if stat is None:
            return None
        return self._lazy_block(stat)

    def put(self, block: Block) -> LazyBlock:
        """
        Store a block unless an object with its id already exists.

        An existing object is returned unchanged: ids are content digests, so
        its content is assumed identical.
        """
        existing = self.stat(block.id)
        if existing is not None:
            if existing.size != block.size:
                logger.warning(
                    f"Block {block.id.hex()} already stored with size {existing.size}, "
                    f"but put requested size {block.size}; possible digest collision"
                )
            logger.debug(f"Block {block.id.hex()} already stored; skipping upload")
            return self._lazy_block(existing)

        object_key = self.key_for(block.id)
        metadata = UploadMetadata(
            content_length=block.size,
            server_side_encryption=self._sse_algorithm,
        )
        if self._metadata_hook is not None:
            metadata = self._metadata_hook(metadata) or metadata

        logger.debug(f"Uploading {block.size} bytes to s3://{self._bucket}/{object_key}")
        with block.open() as content:
            response = self._client.put_object(
                Bucket=self._bucket,
                Key=object_key,
                Body=content,
                **metadata.to_params(),
            )

        stat = metadata_stat(block.id, self._bucket, object_key, response)
        stat = BlockStat(
            id=stat.id,
            size=block.size,
            stored_at=datetime.now(timezone.utc),
            source=stat.source,
            metadata=stat.metadata,
        )
        return self._lazy_block(stat)

    def delete(self, block_id: Multihash) -> bool:
        """
        Delete a block.

        Returns:
            False without issuing a delete if the block is absent, else True
        """
        if self.stat(block_id) is None:
            return False
        object_key = self.key_for(block_id)
        logger.debug(f"Deleting s3://{self._bucket}/{object_key}")
        self._client.delete_object(Bucket=self._bucket, Key=object_key)
        return True

    def list(
        self,
        *,
        after: Optional[Bound] = None,
        before: Optional[Bound] = None,
        limit: Optional[int] = None,
    ) -> Iterator[LazyBlock]:
        """
        Enumerate stored blocks lazily in ascending id order.

        Objects whose keys are not block keys are skipped. Pages are fetched
        only as the consumer advances.
        """
        stats = list_stats(
            self._client,
            self._bucket,
            self._prefix,
            after=after,
            before=before,
            limit=limit,
        )
        return self._iter_blocks(stats)

    def _iter_blocks(self, stats: Iterator[BlockStat]) -> Iterator[LazyBlock]:
        try:
            for stat in stats:
                yield self._lazy_block(stat)
        finally:
            stats.close()

    def erase(self) -> bool:
        """
        Delete every object under the store prefix, block key or not.

        The first failing delete aborts the erase and propagates; objects
        already deleted stay deleted.
        """
        deleted = 0
        for object_key in iter_object_keys(self._client, self._bucket, self._prefix):
            self._client.delete_object(Bucket=self._bucket, Key=object_key)
            deleted += 1
        logger.info(f"Erased {deleted} objects from s3://{self._bucket}/{self._prefix or ''}")
        return True

    def __repr__(self) -> str:
        return f"S3BlockStore(bucket={self._bucket!r}, prefix={self._prefix!r})"


def erase(store: S3BlockStore) -> bool:
    """Clear all blocks from a store by deleting everything under its prefix."""
    return store.erase()
