"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

WP_CONFIG = """<?php
define( 'DB_NAME', 'wordpress' );
define( 'DB_USER', 'md' );
define( 'DB_PASSWORD', 'secret' );
$table_prefix = 'wp_';
"""


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config and state directories into the test's tmp_path."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "xdg-state"))
    return tmp_path


@pytest.fixture
def make_site() -> Callable[..., Path]:
    """Factory creating a WordPress installation tree.

    Keyword flags control which markers are written so tests can build
    incomplete installations.
    """

    def _make(
        root: Path,
        *,
        config: bool = True,
        version: bool = True,
        theme: str | None = "twentytwentyfour",
        config_text: str = WP_CONFIG,
    ) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        if config:
            (root / "wp-config.php").write_text(config_text)
        if version:
            (root / "wp-includes").mkdir(exist_ok=True)
            (root / "wp-includes" / "version.php").write_text("<?php $wp_version = '6.5';\n")
        if theme:
            theme_dir = root / "wp-content" / "themes" / theme
            theme_dir.mkdir(parents=True, exist_ok=True)
            (theme_dir / "functions.php").write_text("<?php\n")
        return root

    return _make


@pytest.fixture
def sample_wp_config() -> str:
    """Typical wp-config.php contents."""
    return WP_CONFIG


@pytest.fixture
def no_census() -> Iterator[None]:
    """Report no other running instances to the execution guard."""
    with patch("wpfleet.core.guard.PsCensus.instances", return_value=[]):
        yield
