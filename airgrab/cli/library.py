"""airgrab/cli/library.py

Inspect the download directory: where it is, what it holds, how big it is.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer

from airgrab.constants.cli_constants import SortOption

app = typer.Typer(
    name="library",
    help="Inspect downloaded models (path, ls, stats).",
    no_args_is_help=True,
)

DIRECTORY_OPTION = typer.Option(None, "--directory", "-d", help="Download root (default: from config).")


def _human_size(num_bytes: int) -> str:
    for unit, factor in (("TB", 1024**4), ("GB", 1024**3), ("MB", 1024**2), ("KB", 1024)):
        if num_bytes >= factor:
            return f"{num_bytes / factor:.2f} {unit}"
    return f"{num_bytes} B"


def _root(directory: Optional[Path]) -> Path:
    if directory is not None:
        return directory.expanduser().resolve()
    from airgrab.core.config import load_config

    return load_config(create=False).directory


@dataclass(frozen=True)
class LibraryEntry:
    path: Path
    size: int
    mtime: float

    @property
    def mtime_dt(self) -> datetime:
        return datetime.fromtimestamp(self.mtime, tz=timezone.utc).astimezone()


def iter_entries(root: Path, pattern: Optional[str] = None) -> Iterator[LibraryEntry]:
    """Files under `root` (recursive), optionally filtered by a glob."""
    if not root.exists():
        return
    for p in root.glob(pattern or "**/*"):
        try:
            if not p.is_file():
                continue
            st = p.stat()
        except OSError:
            continue
        yield LibraryEntry(p, st.st_size, st.st_mtime)


def iter_versions(root: Path) -> Iterator[Path]:
    """Version directories: root/type/category/model/version."""
    if not root.exists():
        return
    for p in root.glob("*/*/*/*"):
        if p.is_dir():
            yield p


@app.command("path")
def cmd_path(directory: Optional[Path] = DIRECTORY_OPTION) -> None:
    """Print the download root."""
    typer.echo(str(_root(directory)))


@app.command("ls")
def cmd_ls(
    directory: Optional[Path] = DIRECTORY_OPTION,
    pattern: Optional[str] = typer.Option(None, "--pattern", "-p", help="Glob (e.g. '**/*.safetensors')."),
    sort: SortOption = typer.Option(SortOption.name, "--sort", case_sensitive=False, help="Sort key."),
    reverse: bool = typer.Option(False, "--reverse", help="Reverse sort order."),
    json_out: bool = typer.Option(False, "--json", help="Output JSON instead of a table."),
) -> None:
    """List downloaded files."""
    root = _root(directory)
    key = {
        SortOption.name: lambda e: str(e.path).lower(),
        SortOption.size: lambda e: e.size,
        SortOption.mtime: lambda e: e.mtime,
    }[sort]
    entries = sorted(iter_entries(root, pattern), key=key, reverse=reverse)

    if json_out:
        payload = [
            {"path": str(e.path.relative_to(root)), "size": e.size, "mtime": e.mtime_dt.isoformat()}
            for e in entries
        ]
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    from rich import box
    from rich.console import Console
    from rich.table import Table

    table = Table(box=box.SIMPLE_HEAVY)
    table.add_column("Path", overflow="fold")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    for e in entries:
        table.add_row(str(e.path.relative_to(root)), _human_size(e.size), e.mtime_dt.strftime("%Y-%m-%d %H:%M"))
    Console().print(table)


@app.command("stats")
def cmd_stats(directory: Optional[Path] = DIRECTORY_OPTION) -> None:
    """Summarise the download root."""
    root = _root(directory)
    entries = list(iter_entries(root))
    total = sum(e.size for e in entries)
    versions = sum(1 for _ in iter_versions(root))
    typer.echo(f"Directory: {root}")
    typer.echo(f"Model versions: {versions}")
    typer.echo(f"Files: {len(entries)}")
    typer.echo(f"Total size: {_human_size(total)} ({total} B)")
