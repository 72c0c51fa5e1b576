"""Unit tests for fleet configuration loading and saving."""

from pathlib import Path

import pytest
import tomli_w
from wpfleet.core.config import FleetConfig, load_config, save_config
from wpfleet.core.errors import ConfigError, ConfigParseError


class TestFleetConfig:
    """Tests for FleetConfig defaults and validation."""

    def test_defaults(self) -> None:
        config = FleetConfig()

        assert config.roots == ["/var/www"]
        assert config.max_depth == 8
        assert config.warning_exit_codes == [2]
        assert config.grace_seconds == 30
        assert config.identity_segment_index == 3
        assert config.credential_constant == "DB_USER"

    def test_unknown_key_rejected(self) -> None:
        with pytest.raises(ValueError):
            FleetConfig.model_validate({"rootz": ["/srv"]})

    def test_zero_warning_code_rejected(self) -> None:
        """Exit code 0 cannot be a warning."""
        with pytest.raises(ValueError, match="positive"):
            FleetConfig(warning_exit_codes=[0])

    def test_depth_bounds(self) -> None:
        with pytest.raises(ValueError):
            FleetConfig(max_depth=0)

    def test_effective_paths_default_to_xdg(self, isolated_xdg: Path) -> None:
        config = FleetConfig()

        assert config.effective_registry_path == isolated_xdg / "xdg-config/wpfleet/sites.txt"
        assert config.effective_lock_path == isolated_xdg / "xdg-state/wpfleet/wpfleet.lock"
        assert config.effective_log_file == isolated_xdg / "xdg-state/wpfleet/wpfleet.log"

    def test_effective_paths_honour_overrides(self, tmp_path: Path) -> None:
        config = FleetConfig(registry_path=tmp_path / "r.txt", lock_path=tmp_path / "l")

        assert config.effective_registry_path == tmp_path / "r.txt"
        assert config.effective_lock_path == tmp_path / "l"


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_yields_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "config.toml") == FleetConfig()

    def test_loads_values(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text(
            tomli_w.dumps({"roots": ["/srv/www"], "exclude": ["*/backups*"], "max_depth": 6})
        )

        config = load_config(path)

        assert config.roots == ["/srv/www"]
        assert config.exclude == ["*/backups*"]
        assert config.max_depth == 6

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text("roots = [\n")

        with pytest.raises(ConfigParseError, match="Invalid TOML"):
            load_config(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('max_depth = "deep"\n')

        with pytest.raises(ConfigError, match="Invalid config content"):
            load_config(path)

    def test_default_location(self, isolated_xdg: Path) -> None:
        path = isolated_xdg / "xdg-config" / "wpfleet" / "config.toml"
        path.parent.mkdir(parents=True)
        path.write_text("wp_cli = '/opt/wp'\n")

        assert load_config().wp_cli == "/opt/wp"


class TestSaveConfig:
    """Tests for save_config."""

    def test_round_trip(self, tmp_path: Path) -> None:
        config = FleetConfig(roots=["/srv"], registry_path=tmp_path / "sites.txt")

        path = save_config(config, tmp_path / "nested" / "config.toml")

        assert load_config(path) == config

    def test_unset_paths_omitted(self, tmp_path: Path) -> None:
        """TOML has no null, so unset optional paths are left out."""
        path = save_config(FleetConfig(), tmp_path / "config.toml")

        text = path.read_text()
        assert "registry_path" not in text
        assert "roots" in text
