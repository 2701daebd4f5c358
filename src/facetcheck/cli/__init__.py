"""
The facetcheck command-line interface, built with Typer and Rich.
"""

import logging
from enum import Enum

import typer
from rich.logging import RichHandler
from typing_extensions import Annotated

from . import eval_sample, sigma, sys_info
from ._console import error_console


class LogLevel(str, Enum):
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"
    NOTSET = "NOTSET"


app = typer.Typer(
    help="facetcheck — Statistical validation of microfacet scattering models.",
    pretty_exceptions_enable=False,
)


@app.callback(invoke_without_command=True)
def cli(
    ctx: typer.Context,
    log_level: Annotated[
        LogLevel, typer.Option(help="Set log level.")
    ] = LogLevel.WARNING,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Enable debug mode. This will notably print exceptions with locals.",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            help="Display version information and exit.",
        ),
    ] = False,
):
    if version:
        from facetcheck import __version__

        print(f"facetcheck version {__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        ctx.exit()

    if debug:
        app.pretty_exceptions_enable = True

    logging.basicConfig(
        level=log_level.name,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, rich_tracebacks=True)],
    )


app.command(name="sigma", help=sigma.__doc__)(sigma.main)
app.command(name="eval-sample", help=eval_sample.__doc__)(eval_sample.main)
app.command(name="sys-info", help=sys_info.__doc__)(sys_info.main)


def main():
    app()


if __name__ == "__main__":
    app()
