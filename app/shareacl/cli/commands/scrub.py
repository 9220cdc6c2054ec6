"""Report scrubbing command.

Removes vendor names and other identifying text from exported reports
using literal and regex substitutions from the command line or config.
"""

from pathlib import Path
from typing import Annotated

import typer

from shareacl.cli.display import create_scrub_table, print_scrub_summary
from shareacl.cli.types import require_config
from shareacl.core.errors import PathNotFoundError
from shareacl.scrub.scrubber import ReportScrubber, ScrubRule
from shareacl.utils.formatting import console, print_error, print_info


def parse_rule(value: str, *, regex: bool = False) -> ScrubRule:
    """Parse a FIND=REPLACEMENT command-line rule.

    The first "=" separates the two parts; a value without "=" removes
    the text entirely.

    Args:
        value: Rule text.
        regex: If True, FIND is a regular expression.

    Returns:
        ScrubRule for the value.

    Raises:
        typer.BadParameter: If FIND is empty or an invalid regex.
    """
    find, _, replacement = value.partition("=")
    try:
        return ScrubRule(pattern=find, replacement=replacement, regex=regex)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def scrub_reports(
    root: Annotated[
        Path,
        typer.Argument(help="Report file or folder to scrub."),
    ],
    rules: Annotated[
        list[str] | None,
        typer.Option("--rule", "-r", help="Literal FIND=REPLACEMENT rule (repeatable)."),
    ] = None,
    regex_rules: Annotated[
        list[str] | None,
        typer.Option("--regex-rule", "-R", help="Regex FIND=REPLACEMENT rule (repeatable)."),
    ] = None,
    extensions: Annotated[
        list[str] | None,
        typer.Option("--ext", "-e", help="File extension to process (repeatable)."),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Count replacements without rewriting files."),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to shareacl.toml."),
    ] = None,
) -> None:
    """Apply scrub rules to every report file under ROOT."""
    config = require_config(config_path)

    scrub_rules = [parse_rule(value) for value in rules or []]
    scrub_rules += [parse_rule(value, regex=True) for value in regex_rules or []]
    if not scrub_rules:
        scrub_rules = [rule.to_rule() for rule in config.scrub.rules]
    if not scrub_rules:
        print_error("No scrub rules given. Use --rule or add [[scrub.rules]] to the config.")
        raise typer.Exit(code=1)

    scrubber = ReportScrubber(
        scrub_rules,
        extensions=extensions or config.scrub.extensions,
        encoding=config.scrub.encoding,
        dry_run=dry_run,
    )

    try:
        results = list(scrubber.scrub(root))
    except PathNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not results:
        print_info("No matching files found.")
        return

    if any(r.changed or r.error for r in results):
        console.print(create_scrub_table(results))
    print_scrub_summary(results)

    if any(r.error for r in results):
        raise typer.Exit(code=1)
