"""
blocks-s3 CLI

Implements 6 CLI verbs over an S3 block store configured from the environment:
- ls: List stored blocks
- stat: Show block metadata
- get: Write block content (or a byte range) to a file or stdout
- put: Store a local file as a block
- rm: Delete a block
- erase: Delete everything under the store prefix
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .cli_context import CLIContext
from .multihash import Multihash
from .operations import Operations, OpsConfig, run_and_exit
from .operations.printers import (
    print_erase_summary, print_listing, print_put_summary, print_removed, print_stat
)

app = typer.Typer(name="blocks-s3", help="Content-addressable block store on S3")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
) -> None:
    """Content-addressable block store on S3."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _operations(verbose: bool = False) -> Operations:
    context = CLIContext.from_env()
    return Operations(context.store, OpsConfig(verbose=verbose))


@app.command()
def ls(
    after: Optional[str] = typer.Option(None, "--after", help="Only ids after this hex id"),
    before: Optional[str] = typer.Option(None, "--before", help="Only ids before this hex id"),
    limit: Optional[int] = typer.Option(None, "--limit", help="Maximum number of blocks"),
) -> None:
    """List stored blocks."""

    def _ls() -> None:
        ops = _operations()
        print_listing(ops.ls(after=after, before=before, limit=limit))

    run_and_exit(_ls)


@app.command()
def stat(
    block_id: str = typer.Argument(..., help="Hex multihash of the block"),
    verbose: bool = typer.Option(False, "--verbose", help="Show origin metadata"),
) -> None:
    """Show block metadata."""

    def _stat() -> None:
        ops = _operations(verbose)
        print_stat(ops.stat(Multihash.from_hex(block_id)), verbose=verbose)

    run_and_exit(_stat)


@app.command()
def get(
    block_id: str = typer.Argument(..., help="Hex multihash of the block"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to file instead of stdout"),
    start: Optional[int] = typer.Option(None, "--start", help="First byte offset (inclusive)"),
    end: Optional[int] = typer.Option(None, "--end", help="Last byte offset (exclusive)"),
) -> None:
    """Write block content to a file or stdout."""

    def _get() -> None:
        ops = _operations()
        parsed = Multihash.from_hex(block_id)
        if output is None:
            ops.get(parsed, typer.get_binary_stream("stdout"), start=start, end=end)
        else:
            with open(output, "wb") as out:
                ops.get(parsed, out, start=start, end=end)

    run_and_exit(_get)


@app.command()
def put(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="File to store"),
) -> None:
    """Store a local file as a block."""

    def _put() -> None:
        ops = _operations()
        block = ops.put(path)
        print_put_summary(block.stat)

    run_and_exit(_put)


@app.command()
def rm(
    block_id: str = typer.Argument(..., help="Hex multihash of the block"),
) -> None:
    """Delete a block."""

    def _rm() -> None:
        ops = _operations()
        ops.rm(Multihash.from_hex(block_id))
        print_removed(block_id)

    run_and_exit(_rm)


@app.command()
def erase(
    yes: bool = typer.Option(False, "--yes", help="Confirm deletion of everything under the prefix"),
) -> None:
    """Delete every object under the store prefix."""

    def _erase() -> None:
        if not yes:
            raise ValueError("Refusing to erase without --yes")
        context = CLIContext.from_env()
        Operations(context.store).erase()
        print_erase_summary(context.settings.bucket, context.settings.prefix)

    run_and_exit(_erase)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
