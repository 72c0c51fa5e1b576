"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from wpfleet import __version__
from wpfleet.cli.commands import config, discover, run, sites
from wpfleet.core.config import load_config
from wpfleet.core.errors import ConfigError
from wpfleet.core.logging import configure_logging
from wpfleet.utils.formatting import print_error

# Create main Typer app
app = typer.Typer(
    name="wpfleet",
    help="Discover WordPress installations and keep them maintained with WP-CLI.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"wpfleet version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            "-d",
            help="Enable debug output.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Configuration file (default: ~/.config/wpfleet/config.toml).",
        ),
    ] = None,
) -> None:
    """wpfleet - WordPress fleet maintenance.

    Find WordPress installations on this host, keep the list in a
    registry and run WP-CLI maintenance on every site as its owner.
    """
    try:
        fleet_config = load_config(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    log_file = configure_logging(debug=debug, log_file=fleet_config.effective_log_file)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["config"] = fleet_config
    ctx.obj["config_path"] = config_path
    ctx.obj["debug"] = debug
    ctx.obj["log_file"] = log_file


# Register commands
app.add_typer(discover.app, name="discover")
app.add_typer(run.app, name="run")
app.add_typer(sites.app, name="sites")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
