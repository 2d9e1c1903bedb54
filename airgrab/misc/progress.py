# progress.py
from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

# (description, total_bytes) -> context manager yielding a per-chunk callback
ProgressFactory = Callable[[str, int], AbstractContextManager[Callable[[int], None]]]


@contextmanager
def transfer_progress(
    description: str,
    total_bytes: int,
    *,
    console: Optional[Console] = None,
) -> Iterator[Callable[[int], None]]:
    """
    Show a rich download bar for one transfer and yield its advance callback.

    `total_bytes` is the advisory size; 0 renders an indeterminate bar.
    """
    columns = (
        TextColumn("[bold]{task.description}"),
        BarColumn(),
        DownloadColumn(),
        TransferSpeedColumn(),
        TimeRemainingColumn(),
    )
    with Progress(*columns, console=console or Console(stderr=True), transient=False) as progress:
        task = progress.add_task(description, total=total_bytes or None)
        yield lambda n: progress.advance(task, n)


@contextmanager
def no_progress(description: str, total_bytes: int) -> Iterator[Callable[[int], None]]:
    """Progress factory that shows nothing (tests, non-interactive runs)."""
    yield lambda n: None


__all__ = ["ProgressFactory", "transfer_progress", "no_progress"]
