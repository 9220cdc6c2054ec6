"""File name cleanup command.

Strips characters that break sync clients and scripts from file (and
optionally folder) names before a share is migrated.
"""

from pathlib import Path
from typing import Annotated

import typer

from shareacl.cli.display import create_rename_table, print_rename_summary
from shareacl.cli.types import require_config, require_root
from shareacl.rename.renamer import FileRenamer
from shareacl.utils.formatting import console, print_error, print_success


def rename_files(
    root: Annotated[
        Path,
        typer.Argument(help="Folder whose entries are renamed."),
    ],
    strip_chars: Annotated[
        str | None,
        typer.Option("--strip", "-s", help="Characters to remove (overrides config)."),
    ] = None,
    recurse: Annotated[
        bool,
        typer.Option("--recurse", "-r", help="Process all subfolders."),
    ] = False,
    include_dirs: Annotated[
        bool,
        typer.Option("--dirs", help="Rename folders as well as files."),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be renamed."),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to shareacl.toml."),
    ] = None,
) -> None:
    """Remove strip characters from names under ROOT."""
    config = require_config(config_path)
    root_path = require_root(root)

    try:
        renamer = FileRenamer(
            strip_chars if strip_chars is not None else config.rename.strip_chars,
            recurse=recurse,
            include_dirs=include_dirs,
            dry_run=dry_run,
        )
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    results = list(renamer.rename(root_path))
    if not results:
        print_success("Nothing to rename.")
        return

    console.print(create_rename_table(results))
    print_rename_summary(results)

    if any(not r.success for r in results):
        raise typer.Exit(code=1)
