"""Unit tests for per-site maintenance orchestration."""

from pathlib import Path
from unittest.mock import patch

import pytest
from wpfleet.core.errors import EnvironmentCheckError, IdentityResolutionError
from wpfleet.core.orchestrator import Orchestrator, check_environment
from wpfleet.identity.resolver import IdentitySource, ResolvedIdentity
from wpfleet.models.operation import Mode, Outcome
from wpfleet.models.site import SiteEntry
from wpfleet.operators.base import ExecutionResult, IdentityRunner
from wpfleet.operators.su import SuRunner
from wpfleet.operators.wpcli import WpCli


class FakeRunner(IdentityRunner):
    """Records invocations and returns scripted exit codes."""

    def __init__(
        self,
        dry_run: bool = False,
        returncodes: dict[str, int] | None = None,
        available: bool = True,
    ) -> None:
        super().__init__(dry_run=dry_run)
        self.calls: list[tuple[str, list[str], str, dict[str, str] | None]] = []
        self._returncodes = returncodes or {}
        self._available = available

    def is_available(self) -> bool:
        return self._available

    def describe(
        self,
        identity: str,
        args: list[str],
        *,
        cwd: str,
        env: dict[str, str] | None = None,
    ) -> list[str]:
        return ["as", identity, *args]

    def run_as(
        self,
        identity: str,
        args: list[str],
        *,
        cwd: str,
        env: dict[str, str] | None = None,
    ) -> ExecutionResult:
        self.calls.append((identity, args, cwd, env))
        verb = " ".join(a for a in args[2:] if not a.startswith("--"))
        code = self._returncodes.get(verb, 0)
        return ExecutionResult(returncode=code, output="done\n", duration=0.01)


class LocalShellRunner(SuRunner):
    """Runs a local shell script per site directory instead of switching accounts."""

    def __init__(self, scripts: dict[str, str]) -> None:
        super().__init__()
        self._scripts = scripts

    def describe(
        self,
        identity: str,
        args: list[str],
        *,
        cwd: str,
        env: dict[str, str] | None = None,
    ) -> list[str]:
        return ["sh", "-c", self._scripts.get(cwd, "echo done")]


class FakeResolver:
    """Resolves every site to "md", except the listed failures."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self._failing = failing or set()

    def resolve(self, entry: SiteEntry) -> ResolvedIdentity:
        if entry.path in self._failing:
            raise IdentityResolutionError(entry.path, "all identity strategies exhausted")
        return ResolvedIdentity(name="md", source=IdentitySource.DIRECTORY_OWNER)


@pytest.fixture
def sites(tmp_path: Path) -> list[SiteEntry]:
    """Three existing site directories."""
    entries = []
    for name in ("one.example", "two.example", "three.example"):
        (tmp_path / "md" / "data" / "www" / name).mkdir(parents=True)
        entries.append(SiteEntry(path=str(tmp_path / "md" / "data" / "www" / name)))
    return entries


class TestCheckEnvironment:
    """Tests for check_environment."""

    def test_missing_wp_cli(self) -> None:
        with (
            patch("wpfleet.operators.wpcli.shutil.which", return_value=None),
            pytest.raises(EnvironmentCheckError, match="WP-CLI executable not found"),
        ):
            check_environment(WpCli(), FakeRunner())

    def test_runner_unavailable(self) -> None:
        with (
            patch("wpfleet.operators.wpcli.shutil.which", return_value="/usr/local/bin/wp"),
            pytest.raises(EnvironmentCheckError, match="Root privileges"),
        ):
            check_environment(WpCli(), FakeRunner(available=False))

    def test_dry_run_does_not_need_privileges(self) -> None:
        with patch("wpfleet.operators.wpcli.shutil.which", return_value="/usr/local/bin/wp"):
            check_environment(WpCli(), FakeRunner(dry_run=True, available=False))


class TestOrchestrator:
    """Tests for Orchestrator.run."""

    def test_unresolvable_site_skipped(self, sites: list[SiteEntry]) -> None:
        """A failed identity skips that site and the run continues."""
        runner = FakeRunner()
        orchestrator = Orchestrator(runner, FakeResolver({sites[1].path}), WpCli())

        stats = orchestrator.run(sites, Mode.PLUGINS)

        assert stats.total_sites == 3
        assert stats.operations == 2
        assert stats.skipped_sites == 1
        assert stats.skipped[0].path == sites[1].path
        assert [call[2] for call in runner.calls] == [sites[0].path, sites[2].path]

    def test_operations_in_mode_order(self, sites: list[SiteEntry]) -> None:
        runner = FakeRunner()
        orchestrator = Orchestrator(runner, FakeResolver(), WpCli())

        stats = orchestrator.run(sites[:1], Mode.FULL)

        names = [r.operation.name for r in stats.results]
        assert names == [
            "core-update",
            "plugin-update-all",
            "theme-update-all",
            "core-migrate-db",
            "db-optimize",
            "db-repair",
            "cron-run-due",
        ]

    def test_failure_does_not_stop_site(self, sites: list[SiteEntry]) -> None:
        """A failing operation leaves later operations and sites untouched."""
        runner = FakeRunner(returncodes={"core update": 1})
        orchestrator = Orchestrator(runner, FakeResolver(), WpCli())

        stats = orchestrator.run(sites[:2], Mode.CORE)

        assert [r.outcome for r in stats.results] == [
            Outcome.FAILURE,
            Outcome.SUCCESS,
            Outcome.FAILURE,
            Outcome.SUCCESS,
        ]
        assert stats.processed_sites == 2

    def test_warning_exit_code(self, sites: list[SiteEntry]) -> None:
        runner = FakeRunner(returncodes={"plugin update": 2})
        orchestrator = Orchestrator(runner, FakeResolver(), WpCli())

        stats = orchestrator.run(sites[:1], Mode.PLUGINS)

        assert stats.warnings == 1
        assert not stats.has_failures

    def test_custom_warning_codes(self, sites: list[SiteEntry]) -> None:
        runner = FakeRunner(returncodes={"plugin update": 2})
        orchestrator = Orchestrator(runner, FakeResolver(), WpCli(), warning_exit_codes=[])

        stats = orchestrator.run(sites[:1], Mode.PLUGINS)

        assert stats.failed == 1

    def test_missing_directory_skipped(self, tmp_path: Path) -> None:
        runner = FakeRunner()
        orchestrator = Orchestrator(runner, FakeResolver(), WpCli())

        stats = orchestrator.run([SiteEntry(path=str(tmp_path / "gone"))], Mode.PLUGINS)

        assert stats.skipped[0].reason == "directory does not exist"
        assert runner.calls == []

    def test_invocation_details(self, sites: list[SiteEntry]) -> None:
        """Operations run as the resolved account in the site directory."""
        runner = FakeRunner()
        orchestrator = Orchestrator(runner, FakeResolver(), WpCli("wp-test-missing"))

        orchestrator.run(sites[:1], Mode.CRON)

        identity, args, cwd, env = runner.calls[0]
        assert identity == "md"
        assert cwd == sites[0].path
        assert args == [
            "wp-test-missing",
            f"--path={sites[0].path}",
            "cron",
            "event",
            "run",
            "--due-now",
            "--url=one.example",
        ]
        assert env == {"HOMEDIR": sites[0].home_dir, "HTTP_HOST": "one.example"}

    def test_dry_run_executes_nothing(self, sites: list[SiteEntry]) -> None:
        runner = FakeRunner(dry_run=True)
        orchestrator = Orchestrator(runner, FakeResolver(), WpCli())

        stats = orchestrator.run(sites, Mode.DATABASE)

        assert runner.calls == []
        assert stats.count(Outcome.SKIPPED) == 6
        assert stats.results[0].output.startswith("as md ")

    def test_runner_oserror_is_failure(self, sites: list[SiteEntry]) -> None:
        runner = FakeRunner()
        orchestrator = Orchestrator(runner, FakeResolver(), WpCli())

        with patch.object(runner, "run_as", side_effect=FileNotFoundError("su")):
            stats = orchestrator.run(sites[:1], Mode.PLUGINS)

        assert stats.failed == 1
        assert stats.results[0].returncode is None

    def test_longest_site_recorded(self, sites: list[SiteEntry]) -> None:
        orchestrator = Orchestrator(FakeRunner(), FakeResolver(), WpCli())

        stats = orchestrator.run(sites, Mode.PLUGINS)

        assert stats.longest_site is not None
        assert stats.longest_site.path in {s.path for s in sites}

    def test_undecodable_output_is_contained(self, sites: list[SiteEntry]) -> None:
        """Non-UTF-8 output from one site fails that operation only."""
        runner = LocalShellRunner({sites[0].path: "printf 'Fehler: \\374ber'; exit 1"})
        orchestrator = Orchestrator(runner, FakeResolver(), WpCli())

        stats = orchestrator.run(sites, Mode.PLUGINS)

        assert [r.outcome for r in stats.results] == [
            Outcome.FAILURE,
            Outcome.SUCCESS,
            Outcome.SUCCESS,
        ]
        assert stats.results[0].output == "Fehler: \ufffdber"
        assert stats.processed_sites == 3
