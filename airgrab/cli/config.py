"""airgrab/cli/config.py

Inspect and initialise the YAML configuration file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="config",
    help="Show or create the airgrab configuration file.",
    no_args_is_help=True,
)

CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Config file path (default: user config dir).")


def _path(config: Optional[Path]) -> Path:
    from airgrab.core.config import default_config_path

    return config.expanduser() if config is not None else default_config_path()


def _mask(secret: Optional[str]) -> str:
    if not secret:
        return "(not set)"
    return secret[:4] + "…" if len(secret) > 8 else "****"


@app.command("path")
def cmd_path(config: Optional[Path] = CONFIG_OPTION) -> None:
    """Print the config file location."""
    typer.echo(str(_path(config)))


@app.command("init")
def cmd_init(
    config: Optional[Path] = CONFIG_OPTION,
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file."),
) -> None:
    """Write a config file holding the default settings."""
    from airgrab.core.config import write_default_config

    path = _path(config)
    if path.exists() and not force:
        typer.echo(f"Config already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)
    write_default_config(path)
    typer.echo(f"Wrote {path}")


@app.command("show")
def cmd_show(config: Optional[Path] = CONFIG_OPTION) -> None:
    """Print the effective settings (file + AIRGRAB_* environment)."""
    from airgrab.core.config import load_config
    from airgrab.core.errors import ConfigError
    from airgrab.logging import log_file_path

    try:
        cfg = load_config(_path(config), create=False)
    except ConfigError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from None

    typer.echo(f"api_key\t{_mask(cfg.api_key)}")
    typer.echo(f"directory\t{cfg.directory}")
    typer.echo(f"api_host\t{cfg.api_host}")
    typer.echo(f"timeout\t{cfg.timeout if cfg.timeout is not None else 'none'}")
    typer.echo(f"poll_interval\t{cfg.poll_interval}")
    typer.echo(f"log_file\t{log_file_path() or 'none'}")
