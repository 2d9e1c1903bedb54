"""airgrab/cli/download.py

Commands that run the download pipeline (`watch`, `get`) and the AIR
inspector (`parse`).

`watch` is the long-running mode: it polls the clipboard, admits text that
starts with "urn:air", and downloads each model version with its preview
images under the configured directory. `get` feeds the same pipeline from the
command line or stdin and admits every prefix the parser understands.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import List, Optional

import typer

from airgrab.constants.cli_constants import DebugMode

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to the YAML config file (default: user config dir, or $AIRGRAB_CONFIG).",
)
DIRECTORY_OPTION = typer.Option(
    None,
    "--directory",
    "-d",
    help="Download root; overrides the config file.",
)
LOG_LEVEL_OPTION = typer.Option(
    DebugMode.INFO,
    "--log-level",
    "-l",
    case_sensitive=False,
    help="Console logging level.",
)
PROGRESS_OPTION = typer.Option(True, "--progress/--no-progress", help="Show download progress bars.")


def _setup(config: Optional[Path], directory: Optional[Path], log_level: DebugMode):
    """Configure logging and load the config. Returns (logger, ToolConfig)."""
    from airgrab.core.config import load_config, set_config
    from airgrab.core.errors import ConfigError
    from airgrab.logging import setup_logger, silence_external

    logger = setup_logger("airgrab", level=log_level.value, force_reconfigure=True)
    silence_external()
    logger.info("Loading...")
    try:
        cfg = load_config(config)
    except ConfigError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from None
    if directory is not None:
        cfg = cfg.with_directory(directory)
    set_config(cfg)

    if not cfg.has_credentials:
        logger.error("No API key defined in config. Some models require you to login, these will fail.")
    logger.info("Using directory: %s", cfg.directory)
    try:
        cfg.paths.ensure_root()
    except OSError as e:
        typer.secho(f"Error: cannot create {cfg.directory}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from None
    return logger, cfg


def _run(snippets: Iterable[str], cfg, *, accept, progress: bool):
    from airgrab.core.client import CivitaiClient
    from airgrab.core.pipeline import run_pipeline
    from airgrab.misc.progress import no_progress, transfer_progress

    factory = transfer_progress if progress else no_progress
    with CivitaiClient(cfg.api_key, host=cfg.api_host, timeout=cfg.timeout) as client:
        return run_pipeline(snippets, client, cfg.paths, accept=accept, progress_factory=factory)


def _print_report(report) -> None:
    from rich import box
    from rich.console import Console
    from rich.table import Table

    table = Table(box=box.SIMPLE_HEAVY)
    table.add_column("AIR", overflow="fold")
    table.add_column("Status")
    table.add_column("Detail", overflow="fold")
    for r in report.results:
        if r.ok:
            table.add_row(str(r.resource), "[green]ok[/green]", str(r.directory))
        else:
            table.add_row(str(r.resource), f"[red]failed[/red] ({r.stage.value})", str(r.error))
    con = Console()
    con.print(table)
    con.print(f"[bold]Downloaded[/bold] {report.succeeded}  [bold]Failed[/bold] {report.failed}")


def _iter_arguments(airs: list[str]) -> Iterator[str]:
    for item in airs:
        if item == "-":
            for line in sys.stdin:
                if line.strip():
                    yield line
        else:
            yield item


def watch(
    config: Optional[Path] = CONFIG_OPTION,
    directory: Optional[Path] = DIRECTORY_OPTION,
    interval: Optional[float] = typer.Option(
        None, "--interval", "-i", min=0.05, help="Clipboard poll interval in seconds."
    ),
    progress: bool = PROGRESS_OPTION,
    log_level: DebugMode = LOG_LEVEL_OPTION,
) -> None:
    """Watch the clipboard and download every copied 'urn:air:...' identifier.

    Stop with Ctrl-C; an item being downloaded at that moment is abandoned.
    """
    import pyperclip

    from airgrab.core.source import ClipboardWatcher, is_watch_candidate

    logger, cfg = _setup(config, directory, log_level)
    try:
        ClipboardWatcher.check_available()
    except pyperclip.PyperclipException as e:
        typer.secho(f"Error: clipboard unavailable: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from None

    watcher = ClipboardWatcher(interval=interval or cfg.poll_interval)
    logger.info("Copy an AIR (urn:air:...) to start a download.")
    try:
        _run(watcher, cfg, accept=is_watch_candidate, progress=progress)
    except KeyboardInterrupt:
        typer.echo("Stopped.")
        raise typer.Exit(code=130) from None


def get(
    airs: List[str] = typer.Argument(..., help="AIRs to download; '-' reads one per line from stdin."),
    config: Optional[Path] = CONFIG_OPTION,
    directory: Optional[Path] = DIRECTORY_OPTION,
    progress: bool = PROGRESS_OPTION,
    log_level: DebugMode = LOG_LEVEL_OPTION,
) -> None:
    """Download the given AIRs through the same pipeline as `watch`.

    Examples
    --------
    airgrab get urn:air:sdxl:lora:civitai:328553@368189

    cat airs.txt | airgrab get -
    """
    from airgrab.core.source import accept_any

    _, cfg = _setup(config, directory, log_level)
    try:
        report = _run(_iter_arguments(airs), cfg, accept=accept_any, progress=progress)
    except KeyboardInterrupt:
        typer.echo("Stopped.")
        raise typer.Exit(code=130) from None
    _print_report(report)


def parse(
    air: str = typer.Argument(..., help="AIR to parse."),
    json_out: bool = typer.Option(False, "--json", help="Output JSON."),
) -> None:
    """Parse an AIR and print its coordinates."""
    from airgrab.core.air import parse_air
    from airgrab.core.errors import AirParseError

    try:
        resource = parse_air(air)
    except AirParseError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from None

    fields = {
        "ecosystem": resource.ecosystem,
        "type": resource.type,
        "source": resource.source,
        "model_id": resource.model_id,
        "version_id": resource.version_id,
        "format": resource.format,
    }
    if json_out:
        typer.echo(json.dumps(fields, ensure_ascii=False, indent=2))
        return
    for key, value in fields.items():
        typer.echo(f"{key}\t{value}")
