"""Exception hierarchy for shareacl.

Fatal errors (a bad root path, an unreadable config file) stop a command
before any work is done. Per-item errors (one folder's security descriptor,
one rename target) are caught by the scanner or operator that raised them,
logged, and reported in the results.
"""


class ShareAclError(Exception):
    """Base exception for all shareacl errors."""


class PathNotFoundError(ShareAclError):
    """Raised when a root path does not exist or is not a directory."""

    def __init__(self, path: str, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"Path not found: {path}")


class AccessDeniedError(ShareAclError):
    """Raised when a security descriptor cannot be read or written."""

    def __init__(self, path: str, message: str | None = None) -> None:
        self.path = path
        super().__init__(message or f"Access denied: {path}")


class NameCollisionError(ShareAclError):
    """Raised when a rename target already exists."""

    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target
        super().__init__(f"Target already exists: {target}")


class ConfigError(ShareAclError):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when a config file cannot be parsed."""
