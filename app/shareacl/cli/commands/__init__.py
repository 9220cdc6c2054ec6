"""CLI commands for shareacl.

This package contains all subcommand implementations.
"""

from shareacl.cli.commands import acl, config, rename, scrub

__all__ = ["acl", "config", "rename", "scrub"]
