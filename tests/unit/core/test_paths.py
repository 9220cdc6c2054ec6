"""Unit tests for path management.

Tests for the per-user config/state directories and root validation.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from shareacl.core.errors import PathNotFoundError
from shareacl.core.paths import (
    APP_NAME,
    CONFIG_FILENAME,
    ensure_dir,
    get_config_dir,
    get_config_path,
    get_log_dir,
    get_report_dir,
    get_state_dir,
    get_theme_path,
    resolve_root,
)


class TestGetConfigDir:
    """Tests for get_config_dir function."""

    def test_default_config_dir(self) -> None:
        """get_config_dir returns ~/.config/shareacl without overrides."""
        with patch.dict(os.environ, {}, clear=True):
            result = get_config_dir()

        assert result == Path.home() / ".config" / APP_NAME

    def test_respects_xdg_config_home(self, tmp_path: Path) -> None:
        """get_config_dir respects XDG_CONFIG_HOME."""
        with patch.dict(os.environ, {"XDG_CONFIG_HOME": str(tmp_path)}, clear=True):
            result = get_config_dir()

        assert result == tmp_path / APP_NAME

    def test_appdata_wins(self, tmp_path: Path) -> None:
        """APPDATA takes precedence over XDG_CONFIG_HOME."""
        env = {"APPDATA": str(tmp_path / "roaming"), "XDG_CONFIG_HOME": str(tmp_path / "xdg")}
        with patch.dict(os.environ, env, clear=True):
            result = get_config_dir()

        assert result == tmp_path / "roaming" / APP_NAME


class TestGetStateDir:
    """Tests for get_state_dir function."""

    def test_default_state_dir(self) -> None:
        """get_state_dir returns ~/.local/state/shareacl without overrides."""
        with patch.dict(os.environ, {}, clear=True):
            result = get_state_dir()

        assert result == Path.home() / ".local" / "state" / APP_NAME

    def test_respects_localappdata(self, tmp_path: Path) -> None:
        """get_state_dir respects LOCALAPPDATA."""
        with patch.dict(os.environ, {"LOCALAPPDATA": str(tmp_path)}, clear=True):
            result = get_state_dir()

        assert result == tmp_path / APP_NAME


class TestDerivedPaths:
    """Tests for paths derived from the base directories."""

    def test_files_under_base_dirs(self, tmp_path: Path) -> None:
        """Config, theme, report and log paths sit under the base dirs."""
        env = {"XDG_CONFIG_HOME": str(tmp_path / "c"), "XDG_STATE_HOME": str(tmp_path / "s")}
        with patch.dict(os.environ, env, clear=True):
            assert get_config_path() == tmp_path / "c" / APP_NAME / CONFIG_FILENAME
            assert get_theme_path() == tmp_path / "c" / APP_NAME / "theme.toml"
            assert get_report_dir() == tmp_path / "s" / APP_NAME / "reports"
            assert get_log_dir() == tmp_path / "s" / APP_NAME / "logs"


class TestEnsureDir:
    """Tests for ensure_dir function."""

    def test_creates_nested_dir(self, tmp_path: Path) -> None:
        """ensure_dir creates missing parents."""
        target = tmp_path / "a" / "b"
        assert ensure_dir(target, "test") == target
        assert target.is_dir()

    def test_existing_dir(self, tmp_path: Path) -> None:
        """ensure_dir accepts an existing directory."""
        assert ensure_dir(tmp_path, "test") == tmp_path

    def test_failure_raises_runtime_error(self, tmp_path: Path) -> None:
        """Creation failures become RuntimeError."""
        blocker = tmp_path / "file"
        blocker.write_text("x")

        with pytest.raises(RuntimeError, match="Cannot create log directory"):
            ensure_dir(blocker / "sub", "log")


class TestResolveRoot:
    """Tests for resolve_root function."""

    def test_existing_directory(self, tmp_path: Path) -> None:
        """An existing directory is returned as absolute path."""
        assert resolve_root(tmp_path) == tmp_path

    def test_string_root(self, tmp_path: Path) -> None:
        """String roots are accepted."""
        assert resolve_root(str(tmp_path)) == tmp_path

    def test_missing_root(self, tmp_path: Path) -> None:
        """A missing root raises PathNotFoundError."""
        missing = tmp_path / "missing"
        with pytest.raises(PathNotFoundError) as exc_info:
            resolve_root(missing)
        assert exc_info.value.path == str(missing)

    def test_file_root(self, tmp_path: Path) -> None:
        """A file is not a valid root."""
        file_path = tmp_path / "file.txt"
        file_path.write_text("x")
        with pytest.raises(PathNotFoundError):
            resolve_root(file_path)
