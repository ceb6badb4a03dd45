"""
Asyncio facade over a blocking BlockStore.

Every operation runs on a worker thread via ``asyncio.to_thread`` so callers
can await results without blocking the event loop. Listing pulls one item per
worker hop; leaving an ``async for`` early (or calling ``aclose``) closes the
underlying generator, so no further pages are requested.
"""
from __future__ import annotations

import asyncio
from typing import AsyncIterator, Iterator, Optional

from ..multihash import Multihash
from .base import Block, BlockStat, BlockStore, Bound, LazyBlock

__all__ = ["AsyncBlockStore"]

_DONE = object()


class AsyncBlockStore:
    """Awaitable wrapper around a BlockStore."""

    def __init__(self, store: BlockStore) -> None:
        self.store = store

    async def stat(self, block_id: Multihash) -> Optional[BlockStat]:
        return await asyncio.to_thread(self.store.stat, block_id)

    async def get(self, block_id: Multihash) -> Optional[LazyBlock]:
        return await asyncio.to_thread(self.store.get, block_id)

    async def put(self, block: Block) -> LazyBlock:
        return await asyncio.to_thread(self.store.put, block)

    async def delete(self, block_id: Multihash) -> bool:
        return await asyncio.to_thread(self.store.delete, block_id)

    async def erase(self) -> bool:
        return await asyncio.to_thread(self.store.erase)

    async def list(
        self,
        *,
        after: Optional[Bound] = None,
        before: Optional[Bound] = None,
        limit: Optional[int] = None,
    ) -> AsyncIterator[LazyBlock]:
        """
        Enumerate stored blocks without blocking the event loop.

        Usage:
            async for block in async_store.list(limit=10):
                ...
        """
        blocks = self.store.list(after=after, before=before, limit=limit)
        try:
            while True:
                block = await asyncio.to_thread(_next_or_done, blocks)
                if block is _DONE:
                    return
                yield block
        finally:
            close = getattr(blocks, "close", None)
            if close is not None:
                await asyncio.to_thread(close)


def _next_or_done(blocks: Iterator[LazyBlock]):
    # StopIteration cannot cross a Future boundary
    return next(blocks, _DONE)
