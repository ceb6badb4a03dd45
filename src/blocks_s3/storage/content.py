"""
Lazy content access for stored blocks.

No network stream is opened until a caller asks for content, and each call
opens a fresh one. Streams are wrapped so that closing early drains the rest of
the HTTP response before releasing it, which keeps the pooled connection
reusable.
"""
from __future__ import annotations

import io
import logging
import threading
from typing import Any

__all__ = ["ContentReader", "DrainingStream", "range_header"]

logger = logging.getLogger(__name__)

# Read size used when draining unread content
DRAIN_CHUNK_SIZE = 64 * 1024


def range_header(start: int, end: int) -> str:
    """
    Build an HTTP Range header for the half-open byte range [start, end).

    Raises:
        ValueError: If the range is empty or negative
    """
    if start < 0 or end <= start:
        raise ValueError(f"Invalid byte range [{start}, {end})")
    return f"bytes={start}-{end - 1}"


class DrainingStream(io.RawIOBase):
    """
    Read-only stream over a botocore StreamingBody.

    ``close()`` drains any unread bytes, then closes the body. Draining is best
    effort. Closing is idempotent and safe to call from another thread.
    """

    def __init__(self, body: Any, *, description: str = "") -> None:
        super().__init__()
        self._body = body
        self._description = description
        self._eof = False
        self._lock = threading.Lock()

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        view = memoryview(buffer).cast("B")
        # Body reads are serialized with close(), which waits for an in-flight read
        with self._lock:
            if self.closed:
                raise ValueError("I/O operation on closed stream")
            if not len(view):
                return 0
            chunk = self._body.read(len(view))
            if not chunk:
                self._eof = True
                return 0
        n = len(chunk)
        view[:n] = chunk
        return n

    def close(self) -> None:
        with self._lock:
            if self.closed:
                return
            try:
                if not self._eof:
                    self._drain()
            finally:
                try:
                    self._body.close()
                finally:
                    super().close()

    def _drain(self) -> None:
        drained = 0
        try:
            while True:
                chunk = self._body.read(DRAIN_CHUNK_SIZE)
                if not chunk:
                    break
                drained += len(chunk)
        except Exception as e:
            logger.debug(f"Failed to drain {self._description}: {e}")
            return
        if drained:
            logger.debug(f"Drained {drained} unread bytes from {self._description}")
        self._eof = True


class ContentReader:
    """
    Opens content streams for a single S3 object.

    Args:
        client: boto3 S3 client
        bucket: Bucket name
        key: Object key
    """

    def __init__(self, client: Any, bucket: str, key: str) -> None:
        self._client = client
        self.bucket = bucket
        self.key = key

    def read_all(self) -> DrainingStream:
        """Open a stream over the whole object."""
        logger.debug(f"Opening s3://{self.bucket}/{self.key}")
        response = self._client.get_object(Bucket=self.bucket, Key=self.key)
        return DrainingStream(response["Body"], description=f"s3://{self.bucket}/{self.key}")

    def read_range(self, start: int, end: int) -> DrainingStream:
        """
        Open a stream over bytes [start, end) of the object.

        The request uses an inclusive upper bound of ``end - 1``.
        """
        header = range_header(start, end)
        logger.debug(f"Opening s3://{self.bucket}/{self.key} range {header}")
        response = self._client.get_object(Bucket=self.bucket, Key=self.key, Range=header)
        return DrainingStream(response["Body"], description=f"s3://{self.bucket}/{self.key} ({header})")

    def __repr__(self) -> str:
        return f"ContentReader(s3://{self.bucket}/{self.key})"
