"""Per-user path management for shareacl.

On Windows the directories follow the usual profile locations, elsewhere
the XDG Base Directory Specification:

- Config: %APPDATA%\\shareacl\\ or ~/.config/shareacl/
- State: %LOCALAPPDATA%\\shareacl\\ or ~/.local/state/shareacl/

Exported reports and removal logs live under the state directory unless
the configuration points them somewhere else.
"""

import os
from pathlib import Path

from shareacl.core.errors import PathNotFoundError

# Application identifier for directory naming
APP_NAME = "shareacl"

CONFIG_FILENAME = "shareacl.toml"


def _get_app_dir(env_vars: tuple[str, ...], default_subdir: str) -> Path:
    """Get an application directory respecting environment overrides.

    The first environment variable that is set wins.

    Args:
        env_vars: Environment variable names to try, in order.
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    for env_var in env_vars:
        base = os.environ.get(env_var)
        if base:
            return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to %APPDATA%/shareacl, XDG_CONFIG_HOME/shareacl or ~/.config/shareacl.
    """
    return _get_app_dir(("APPDATA", "XDG_CONFIG_HOME"), ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    Returns:
        Path to %LOCALAPPDATA%/shareacl, XDG_STATE_HOME/shareacl
        or ~/.local/state/shareacl.
    """
    return _get_app_dir(("LOCALAPPDATA", "XDG_STATE_HOME"), ".local/state")


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return get_config_dir() / CONFIG_FILENAME


def get_theme_path() -> Path:
    """Get the user theme override path."""
    return get_config_dir() / "theme.toml"


def get_report_dir() -> Path:
    """Get the default directory for exported CSV reports."""
    return get_state_dir() / "reports"


def get_log_dir() -> Path:
    """Get the default directory for removal logs."""
    return get_state_dir() / "logs"


def ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def resolve_root(root: str | Path) -> Path:
    """Validate a root directory before any work is done.

    Args:
        root: Root directory path.

    Returns:
        Absolute root path.

    Raises:
        PathNotFoundError: If the root does not exist or is not a directory.
    """
    path = Path(root)
    try:
        if not path.is_dir():
            raise PathNotFoundError(str(root))
        return path.absolute()
    except OSError as e:
        raise PathNotFoundError(str(root), f"Cannot access {root}: {e}") from e
