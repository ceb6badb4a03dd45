"""
Human-readable output formatting.

Centralizes all CLI output formatting so commands stay thin.
"""
from __future__ import annotations

from typing import Iterable, Optional

import typer
from rich.console import Console
from rich.table import Table

from ..storage.base import BlockStat

_console = Console()


def print_stat(stat: BlockStat, verbose: bool = False) -> None:
    """
    Print block metadata.

    Args:
        stat: Block stat to display
        verbose: Also show origin metadata headers
    """
    _console.print(f"[bold]Id:[/] {stat.id.hex()}", soft_wrap=True)
    _console.print(f"[bold]Algorithm:[/] {stat.id.algorithm}", soft_wrap=True)
    _console.print(f"[bold]Size:[/] {stat.size} ({_format_bytes(stat.size)})", soft_wrap=True)
    _console.print(f"[bold]Stored:[/] {_format_time(stat)}", soft_wrap=True)
    _console.print(f"[bold]Source:[/] {stat.source}", soft_wrap=True)

    if verbose and stat.metadata:
        table = Table(title="Metadata")
        table.add_column("Header", style="cyan", no_wrap=True)
        table.add_column("Value", style="yellow")
        for name, value in sorted(stat.metadata.items()):
            table.add_row(name, str(value))
        _console.print(table)


def print_listing(stats: Iterable[BlockStat]) -> None:
    """
    Print one line per block: id, size, stored-at (tab separated).
    """
    for stat in stats:
        typer.echo(f"{stat.id.hex()}\t{stat.size}\t{_format_time(stat)}")


def print_put_summary(stat: BlockStat) -> None:
    typer.echo(f"Stored {stat.id.hex()} ({_format_bytes(stat.size)})")
    typer.echo(f"Source: {stat.source}")


def print_removed(hex_id: str) -> None:
    typer.echo(f"Removed {hex_id}")


def print_erase_summary(bucket: str, prefix: Optional[str]) -> None:
    _console.print(f"[bold]Erased[/] s3://{bucket}/{prefix or ''}", soft_wrap=True)


def _format_time(stat: BlockStat) -> str:
    stored_at = stat.stored_at
    return stored_at.isoformat() if stored_at is not None else "-"


def _format_bytes(size_bytes: int) -> str:
    """
    Format byte count as human-readable string.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "42 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f} GB"
