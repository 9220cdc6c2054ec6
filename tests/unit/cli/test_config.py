"""Unit tests for the config CLI commands."""

from pathlib import Path

import pytest
from shareacl.cli.main import app
from shareacl.core.config import ShareAclConfig, load_config
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Redirect the default config path into tmp_path."""
    path = tmp_path / "config" / "shareacl.toml"
    monkeypatch.setattr("shareacl.core.config.get_config_path", lambda: path)
    monkeypatch.setattr("shareacl.cli.commands.config.get_config_path", lambda: path)
    return path


class TestConfigInit:
    """Tests for shareacl config init."""

    def test_writes_defaults(self, config_path: Path) -> None:
        """init writes the built-in defaults."""
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0
        assert "Config written" in result.output
        assert load_config(config_path) == ShareAclConfig()

    def test_refuses_existing(self, config_path: Path) -> None:
        """An existing config is not overwritten without --force."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text('[acl]\nkeep = ["CONTOSO\\\\Backup_Ops"]\n')

        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 1
        assert "--force" in result.output
        assert load_config(config_path).acl.keep == ["CONTOSO\\Backup_Ops"]

    def test_force_overwrites(self, config_path: Path) -> None:
        """--force replaces an existing config."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text('[acl]\nkeep = ["CONTOSO\\\\Backup_Ops"]\n')

        result = runner.invoke(app, ["config", "init", "--force"])

        assert result.exit_code == 0
        assert load_config(config_path).acl.keep == []

    def test_explicit_path(self, tmp_path: Path, config_path: Path) -> None:
        """--path writes to the given file."""
        target = tmp_path / "other.toml"

        result = runner.invoke(app, ["config", "init", "--path", str(target)])

        assert result.exit_code == 0
        assert target.exists()
        assert not config_path.exists()


class TestConfigShow:
    """Tests for shareacl config show."""

    def test_show_defaults(self, config_path: Path) -> None:
        """Without a config file the defaults are shown."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "built-in defaults" in result.output
        assert "[acl]" in result.output
        assert "CREATOR OWNER" in result.output

    def test_show_file(self, config_path: Path) -> None:
        """An existing config file is shown with its values."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text('[acl]\ndelimiter = ";"\n')

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert 'delimiter = ";"' in result.output

    def test_show_invalid(self, config_path: Path) -> None:
        """An invalid config exits 1."""
        config_path.parent.mkdir(parents=True)
        config_path.write_text("[acl\n")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 1
        assert "Failed to load config" in result.output
