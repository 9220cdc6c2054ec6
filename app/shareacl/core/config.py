"""shareacl configuration and settings.

Configuration is stored in shareacl.toml in the config directory and
holds the identity lists used by the ACL commands, the rename strip
characters, and the scrub rules. A missing default file means built-in
defaults; every list can be overridden on the command line.

Example:
    [acl]
    exclusions = ["CREATOR OWNER", "SYSTEM", "Administrators", "Domain Admins"]
    keep = ["CONTOSO\\\\Backup_Ops"]

    [[scrub.rules]]
    pattern = "Acme Storage Inc."
    replacement = ""
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from shareacl.acl.identity import (
    DEFAULT_EXCLUSIONS,
    PROTECTED_IDENTITY_PATTERNS,
    ExclusionSet,
    KeepPolicy,
)
from shareacl.core.errors import ConfigError, ConfigNotFoundError, ConfigParseError
from shareacl.core.paths import get_config_path, get_log_dir, get_report_dir
from shareacl.rename.renamer import DEFAULT_STRIP_CHARS
from shareacl.scrub.scrubber import DEFAULT_EXTENSIONS, ScrubRule

logger = logging.getLogger(__name__)


class AclSettings(BaseModel):
    """Settings for the acl commands.

    Attributes:
        exclusions: Identity fragments left out of filtered reports.
        protected_patterns: Regex patterns for identities never removed.
        keep: Explicit identities never removed (e.g., "CONTOSO\\Backup_Ops").
        export_dir: Directory for CSV exports (None = state directory).
        log_dir: Directory for removal logs (None = state directory).
        delimiter: CSV field delimiter.
    """

    model_config = ConfigDict(extra="forbid")

    exclusions: Annotated[
        list[str],
        Field(default_factory=lambda: list(DEFAULT_EXCLUSIONS), description="Report exclusions"),
    ]
    protected_patterns: Annotated[
        list[str],
        Field(
            default_factory=lambda: list(PROTECTED_IDENTITY_PATTERNS),
            description="Identity patterns never removed",
        ),
    ]
    keep: Annotated[
        list[str],
        Field(default_factory=list, description="Identities never removed"),
    ]
    export_dir: Annotated[Path | None, Field(description="CSV export directory")] = None
    log_dir: Annotated[Path | None, Field(description="Removal log directory")] = None
    delimiter: Annotated[str, Field(min_length=1, max_length=1)] = ","

    @field_validator("protected_patterns")
    @classmethod
    def validate_patterns(cls, value: list[str]) -> list[str]:
        """Validate that protected patterns compile."""
        KeepPolicy(patterns=tuple(value))
        return value

    def exclusion_set(self, override: list[str] | None = None) -> ExclusionSet:
        """Build the report exclusion set, preferring a command-line override."""
        return ExclusionSet.of(override if override else self.exclusions)

    def keep_policy(self, extra_keep: list[str] | None = None) -> KeepPolicy:
        """Build the removal keep policy, adding command-line keep identities."""
        return KeepPolicy(
            patterns=tuple(self.protected_patterns),
            keep=(*self.keep, *(extra_keep or [])),
        )

    @property
    def effective_export_dir(self) -> Path:
        """Export directory, falling back to the state directory."""
        return self.export_dir or get_report_dir()

    @property
    def effective_log_dir(self) -> Path:
        """Removal log directory, falling back to the state directory."""
        return self.log_dir or get_log_dir()


class RenameSettings(BaseModel):
    """Settings for the rename command."""

    model_config = ConfigDict(extra="forbid")

    strip_chars: Annotated[str, Field(min_length=1)] = DEFAULT_STRIP_CHARS


class ScrubRuleSettings(BaseModel):
    """One configured scrub rule."""

    model_config = ConfigDict(extra="forbid")

    pattern: Annotated[str, Field(min_length=1)]
    replacement: str = ""
    regex: bool = False
    ignore_case: bool = False

    def to_rule(self) -> ScrubRule:
        """Convert to a ScrubRule."""
        return ScrubRule(
            pattern=self.pattern,
            replacement=self.replacement,
            regex=self.regex,
            ignore_case=self.ignore_case,
        )


class ScrubSettings(BaseModel):
    """Settings for the scrub command."""

    model_config = ConfigDict(extra="forbid")

    extensions: Annotated[
        list[str],
        Field(default_factory=lambda: list(DEFAULT_EXTENSIONS)),
    ]
    encoding: str = "utf-8"
    rules: Annotated[list[ScrubRuleSettings], Field(default_factory=list)]

    @field_validator("rules")
    @classmethod
    def validate_rules(cls, value: list[ScrubRuleSettings]) -> list[ScrubRuleSettings]:
        """Validate that regex rules compile."""
        for rule in value:
            rule.to_rule()
        return value


class ShareAclConfig(BaseModel):
    """Top-level shareacl configuration."""

    model_config = ConfigDict(extra="forbid")

    acl: Annotated[AclSettings, Field(default_factory=AclSettings)]
    rename: Annotated[RenameSettings, Field(default_factory=RenameSettings)]
    scrub: Annotated[ScrubSettings, Field(default_factory=ScrubSettings)]


def load_config(path: Path | None = None) -> ShareAclConfig:
    """Load configuration from a TOML file.

    A missing file at the default location yields the built-in defaults.
    A missing file given explicitly is an error.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated ShareAclConfig.

    Raises:
        ConfigNotFoundError: If an explicit config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        if path is not None:
            raise ConfigNotFoundError(f"Config not found: {config_path}")
        logger.debug("No config at %s, using defaults", config_path)
        return ShareAclConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return ShareAclConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: ShareAclConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written to a temporary file in the same directory and
    moved into place with os.replace().

    Args:
        config: Configuration to save.
        path: Target path. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    data = config_to_dict(config)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_to_dict(config: ShareAclConfig) -> dict[str, Any]:
    """Convert a config to a TOML-serializable dictionary.

    None values are dropped (TOML has no null) and paths become strings.
    """
    return config.model_dump(mode="json", exclude_none=True)
