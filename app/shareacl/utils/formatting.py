"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

import sys

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from shareacl.acl.models import AccessRule, AccessType, format_flags
from shareacl.core.theme import get_theme


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_rule_table(title: str = "Access Rules", *, extended: bool = False) -> Table:
    """Create a pre-configured table for displaying access rules.

    Args:
        title: Table title.
        extended: If True, add type, inheritance and propagation columns.

    Returns:
        Rich Table configured for rule display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Folder", style="folder", overflow="fold")
    table.add_column("Identity", style="identity", no_wrap=True)
    table.add_column("Rights", style="muted")
    if extended:
        table.add_column("Type", width=6)
        table.add_column("Inherited", width=9, justify="center")
        table.add_column("Inheritance", style="muted")
        table.add_column("Propagation", style="muted")
    return table


def format_rule_row(
    folder: str, rule: AccessRule, *, extended: bool = False
) -> tuple[str, ...]:
    """Format an access rule as a table row with styling.

    Args:
        folder: Folder path the rule belongs to.
        rule: The access rule.
        extended: If True, include the extended columns.

    Returns:
        Tuple of cell strings with Rich markup.
    """
    # Folder and identity names may contain square brackets
    row: tuple[str, ...] = (escape(folder), escape(rule.identity), rule.rights_display)
    if not extended:
        return row

    style = "deny" if rule.access_type == AccessType.DENY else "allow"
    inherited = "[inherited]yes[/]" if rule.is_inherited else "-"
    return (
        *row,
        f"[{style}]{rule.access_type.value}[/]",
        inherited,
        format_flags(rule.inheritance_flags),
        format_flags(rule.propagation_flags),
    )


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
