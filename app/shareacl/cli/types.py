"""Shared types and utilities for CLI commands.

This module provides common enums and the helpers that turn fatal
setup errors (bad config, missing root, no backend) into a clean
error message and exit code 1.
"""

from enum import Enum
from pathlib import Path

import typer

from shareacl.acl.backend import SecurityBackend, get_backend
from shareacl.core.config import ShareAclConfig, load_config
from shareacl.core.errors import ConfigError, ConfigNotFoundError, PathNotFoundError
from shareacl.core.paths import resolve_root
from shareacl.utils.formatting import print_error, print_info


class OutputFormat(str, Enum):
    """Output format options for report commands."""

    TABLE = "table"
    JSON = "json"


def require_config(config_path: Path | None = None) -> ShareAclConfig:
    """Load configuration or exit with a helpful error message.

    Args:
        config_path: Optional explicit config path.

    Returns:
        Loaded and validated ShareAclConfig.

    Raises:
        typer.Exit: If the config cannot be loaded.
    """
    try:
        return load_config(config_path)
    except ConfigNotFoundError as e:
        print_error(str(e))
        print_info("Run 'shareacl config init' to create a config file.")
        raise typer.Exit(code=1) from e
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=1) from e


def require_root(root: Path) -> Path:
    """Validate a root directory or exit before any work is done.

    Args:
        root: Root directory argument.

    Returns:
        Absolute root path.

    Raises:
        typer.Exit: If the root does not exist.
    """
    try:
        return resolve_root(root)
    except PathNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def require_backend() -> SecurityBackend:
    """Get the security backend or exit if it cannot run here.

    Returns:
        An available SecurityBackend.

    Raises:
        typer.Exit: If the backend is not available on this system.
    """
    backend = get_backend()
    if not backend.is_available():
        print_error(
            f"Security backend '{backend.name}' is not available. "
            "ACL commands require Windows with pywin32 installed."
        )
        raise typer.Exit(code=1)
    return backend
