"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from shareacl import __version__
from shareacl.cli.commands import acl, config, rename, scrub
from shareacl.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="shareacl",
    help="Audit and migrate NTFS folder permissions on file shares.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"shareacl version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Route library logging through Rich on stderr.

    Args:
        verbose: Log at DEBUG level.
        quiet: Log errors only. Ignored when verbose is set.
    """
    level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose)],
        force=True,
    )


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
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """shareacl - NTFS permission tooling for file share migrations.

    Report explicit folder permissions, strip them down to a protected
    set before a migration, and clean up file names and reports.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    configure_logging(verbose=verbose, quiet=quiet)


# Register commands
app.add_typer(acl.app, name="acl")
app.command("rename")(rename.rename_files)
app.command("scrub")(scrub.scrub_reports)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
