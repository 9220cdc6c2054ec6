"""CLI package for shareacl.

This package contains the Typer application and all subcommands.
"""

from shareacl.cli.main import app

__all__ = ["app"]
