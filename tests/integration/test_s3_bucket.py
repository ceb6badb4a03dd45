"""
Integration tests against a real S3 bucket.

Skipped unless BLOCKS_S3_TEST_BUCKET names a bucket the ambient AWS
credentials can write to. Each run works under a fresh random prefix and
erases it afterwards.
"""
from __future__ import annotations

import os
import uuid

import pytest

from blocks_s3.settings import StoreSettings
from blocks_s3.storage.base import Block
from blocks_s3.storage.s3_store import S3BlockStore

TEST_BUCKET = os.getenv("BLOCKS_S3_TEST_BUCKET")
TEST_REGION = os.getenv("BLOCKS_S3_TEST_REGION")

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not TEST_BUCKET, reason="BLOCKS_S3_TEST_BUCKET not set"),
]


@pytest.fixture
def live_store():
    settings = StoreSettings(
        bucket=TEST_BUCKET,
        prefix=f"blocks-s3-it/{uuid.uuid4().hex}",
        region=TEST_REGION,
    )
    store = S3BlockStore.from_settings(settings)
    yield store
    store.erase()


class TestLiveBucket:
    """End-to-end store behavior against S3."""

    def test_block_lifecycle(self, live_store):
        block = Block.from_bytes(b"integration block content")

        stored = live_store.put(block)
        assert stored.size == block.size
        assert live_store.stat(block.id).size == block.size

        with live_store.get(block.id).open(0, 11) as stream:
            assert stream.read() == b"integration"

        assert [b.id for b in live_store.list()] == [block.id]
        assert live_store.delete(block.id) is True
        assert live_store.stat(block.id) is None

    def test_put_is_idempotent(self, live_store):
        block = Block.from_bytes(b"same bytes")
        first = live_store.put(block)
        second = live_store.put(block)
        assert first.id == second.id
        assert [b.id for b in live_store.list()] == [block.id]
