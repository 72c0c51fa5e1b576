"""Unit tests for the main CLI application."""

from pathlib import Path

from typer.testing import CliRunner
from wpfleet import __version__
from wpfleet.cli.main import app

runner = CliRunner()


class TestMainApp:
    """Tests for global options."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"wpfleet version {__version__}" in result.output

    def test_help_lists_commands(self) -> None:
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("discover", "run", "sites", "config"):
            assert command in result.output

    def test_invalid_config_file(self, tmp_path: Path) -> None:
        """A broken config file aborts every command with exit code 1."""
        config = tmp_path / "config.toml"
        config.write_text("roots = [\n")

        result = runner.invoke(app, ["--config", str(config), "config", "show"])

        assert result.exit_code == 1
        assert "Invalid TOML" in result.output

    def test_log_file_created(self, isolated_xdg: Path) -> None:
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert (isolated_xdg / "xdg-state" / "wpfleet" / "wpfleet.log").exists()
