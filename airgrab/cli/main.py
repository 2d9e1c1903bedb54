# airgrab/cli/main.py
from __future__ import annotations

import typer

from airgrab import __version__
from airgrab.cli.config import app as config_app
from airgrab.cli.download import get, parse, watch
from airgrab.cli.library import app as library_app

app = typer.Typer(
    name="airgrab",
    add_completion=False,
    help="Download Civitai models from AIR identifiers (urn:air:...).",
)


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"airgrab version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """airgrab CLI main callback."""
    pass


app.command("watch")(watch)
app.command("get")(get)
app.command("parse")(parse)

app.add_typer(config_app, name="config", help="Show or create the configuration file.")
app.add_typer(library_app, name="library", help="Inspect downloaded models (path, ls, stats).")

if __name__ == "__main__":
    app()
