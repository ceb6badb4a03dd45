"""
Operations Facade - Application service layer.

Provides a clean interface between the CLI and the block store, turning
absent blocks into BlockNotFoundError and handling local file I/O, while
keeping CLI commands thin and testable.
"""
from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import IO, List, Optional

from ..errors import BlockNotFoundError
from ..multihash import Multihash
from ..storage.base import Block, BlockStat, BlockStore, LazyBlock

__all__ = ["Operations", "OpsConfig"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OpsConfig:
    """Configuration for operations."""
    verbose: bool = False


class Operations:
    """
    Facade for block store operations used by the CLI.

    Args:
        store: Block store to operate on
        config: Operations configuration
    """

    def __init__(self, store: BlockStore, config: Optional[OpsConfig] = None):
        self.store = store
        self.config = config or OpsConfig()

    def ls(
        self,
        *,
        after: Optional[str] = None,
        before: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[BlockStat]:
        """List block stats, materialized for printing."""
        return [block.stat for block in self.store.list(after=after, before=before, limit=limit)]

    def stat(self, block_id: Multihash) -> BlockStat:
        """
        Raises:
            BlockNotFoundError: If the block is not stored
        """
        stat = self.store.stat(block_id)
        if stat is None:
            raise BlockNotFoundError(f"Block not found: {block_id.hex()}", block_id=block_id.hex())
        return stat

    def get(
        self,
        block_id: Multihash,
        out: IO[bytes],
        *,
        start: Optional[int] = None,
        end: Optional[int] = None,
    ) -> LazyBlock:
        """
        Copy block content (or a byte range of it) into ``out``.

        Raises:
            BlockNotFoundError: If the block is not stored
        """
        block = self.store.get(block_id)
        if block is None:
            raise BlockNotFoundError(f"Block not found: {block_id.hex()}", block_id=block_id.hex())

        with block.open(start, end) as content:
            shutil.copyfileobj(content, out)
        return block

    def put(self, path: Path) -> LazyBlock:
        """Store a local file as a block identified by its sha2-256 multihash."""
        block = Block.from_file(path)
        logger.debug(f"Storing {path} as {block.id.hex()} ({block.size} bytes)")
        return self.store.put(block)

    def rm(self, block_id: Multihash) -> None:
        """
        Raises:
            BlockNotFoundError: If the block is not stored
        """
        if not self.store.delete(block_id):
            raise BlockNotFoundError(f"Block not found: {block_id.hex()}", block_id=block_id.hex())

    def erase(self) -> bool:
        return self.store.erase()
