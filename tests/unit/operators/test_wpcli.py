"""Unit tests for WP-CLI command construction."""

from unittest.mock import MagicMock, patch

from wpfleet.models.operation import CACHE_FLUSH, PLUGIN_UPDATE_ALL
from wpfleet.models.site import SiteEntry
from wpfleet.operators.wpcli import WpCli
from wpfleet.utils.shell import CommandResult

SITE = SiteEntry(path="/var/www/md/data/www/iya.ru")


class TestWpCli:
    """Tests for WpCli."""

    @patch("wpfleet.operators.wpcli.shutil.which", return_value="/usr/local/bin/wp")
    def test_executable_resolved(self, _which: MagicMock) -> None:
        wp = WpCli()

        assert wp.executable == "/usr/local/bin/wp"
        assert wp.is_available()

    @patch("wpfleet.operators.wpcli.shutil.which", return_value=None)
    def test_missing_executable(self, _which: MagicMock) -> None:
        wp = WpCli("wp")

        assert wp.executable == "wp"
        assert not wp.is_available()

    @patch("wpfleet.operators.wpcli.shutil.which", return_value="/usr/local/bin/wp")
    def test_build_args(self, _which: MagicMock) -> None:
        args = WpCli().build_args(SITE, PLUGIN_UPDATE_ALL)

        assert args == [
            "/usr/local/bin/wp",
            "--path=/var/www/md/data/www/iya.ru",
            "plugin",
            "update",
            "--all",
        ]

    @patch("wpfleet.operators.wpcli.shutil.which", return_value="/usr/local/bin/wp")
    def test_build_args_with_url(self, _which: MagicMock) -> None:
        site = SiteEntry(path="/var/www/a/news", domain="news.a.ru")

        args = WpCli().build_args(site, CACHE_FLUSH)

        assert args[-1] == "--url=news.a.ru"

    def test_build_env(self) -> None:
        assert WpCli.build_env(SITE) == {"HOMEDIR": "/var/www/md/data", "HTTP_HOST": "iya.ru"}

    @patch("wpfleet.operators.wpcli.run_command")
    @patch("wpfleet.operators.wpcli.shutil.which", return_value="/usr/local/bin/wp")
    def test_self_update(self, _which: MagicMock, mock_run: MagicMock) -> None:
        mock_run.return_value = CommandResult(stdout="Success", stderr="", returncode=0)

        result = WpCli().self_update()

        assert result.success
        mock_run.assert_called_once()
        assert mock_run.call_args.args[0] == [
            "/usr/local/bin/wp",
            "cli",
            "update",
            "--yes",
            "--allow-root",
        ]
