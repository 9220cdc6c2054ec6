"""Configuration commands.

Creates and displays the shareacl.toml configuration file.
"""

from pathlib import Path
from typing import Annotated

import tomli_w
import typer
from rich.syntax import Syntax

from shareacl.cli.types import require_config
from shareacl.core.config import ShareAclConfig, config_to_dict, save_config
from shareacl.core.errors import ConfigError
from shareacl.core.paths import get_config_path
from shareacl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Create and show the configuration file.",
    invoke_without_command=True,
    no_args_is_help=True,
)

PathOption = Annotated[
    Path | None,
    typer.Option("--path", "-p", help="Config file path (default: user config dir)."),
]


@app.command()
def init(
    path: PathOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with the built-in defaults."""
    target = path or get_config_path()
    if target.exists() and not force:
        print_error(f"Config already exists: {target}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        saved = save_config(ShareAclConfig(), target)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")


@app.command()
def show(path: PathOption = None) -> None:
    """Show the effective configuration as TOML."""
    config = require_config(path)
    source = path or get_config_path()
    label = str(source) if source.exists() else "built-in defaults"

    print_info(f"Configuration ({label}):")
    console.print(Syntax(tomli_w.dumps(config_to_dict(config)), "toml", word_wrap=True))
