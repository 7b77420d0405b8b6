"""kvmodel CLI: operator console for inspecting stored records."""

from __future__ import annotations

import logging
from typing import Optional

import typer

from kvmodel.cli import info, records

app = typer.Typer(
    name="kvmodel",
    help="kvmodel CLI: inspect records, index sets and id sequences in the store.",
    no_args_is_help=True,
)


class _State:
    """Global CLI state shared across subcommands."""

    json_output: bool = False


state = _State()


def _version_callback(value: bool) -> None:
    if value:
        from kvmodel import __version__

        print(f"kvmodel {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    redis_url: Optional[str] = typer.Option(
        None,
        "--redis-url",
        envvar="KVMODEL_REDIS_URL",
        help="Store URL (default: redis://localhost:6379/0)",
    ),
    namespace: Optional[str] = typer.Option(
        None,
        "--namespace",
        "-n",
        envvar="KVMODEL_NAMESPACE",
        help="Global key namespace",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output when supported"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log store commands"),
    version: bool = typer.Option(
        False, "--version", help="Show version", is_eager=True, callback=_version_callback
    ),
) -> None:
    """Global options for all kvmodel commands."""
    from kvmodel.config import configure
    from kvmodel.connection import connect
    from kvmodel.errors import ConfigurationError

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    settings: dict[str, str] = {}
    if redis_url:
        settings["redis_url"] = redis_url
    if namespace:
        settings["namespace"] = namespace
    configure(**settings)
    if redis_url:
        try:
            connect(redis_url)
        except ConfigurationError as e:
            raise typer.BadParameter(str(e))
    state.json_output = json_output
    if ctx.invoked_subcommand is None and not version:
        print(ctx.get_help())
        raise typer.Exit()


app.command(name="ids")(records.ids_cmd)
app.command(name="show")(records.show_cmd)
app.command(name="info")(info.info_cmd)


def main() -> None:
    """Entry point for the kvmodel CLI."""
    app()
