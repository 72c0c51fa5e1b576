"""Unit tests for run summary display."""

from pathlib import Path

from rich.console import Console
from wpfleet.cli.display import create_problems_table, create_summary_table, print_run_summary
from wpfleet.models.operation import CORE_UPDATE, DB_REPAIR, OperationResult, Outcome
from wpfleet.models.stats import RunStats
from wpfleet.utils.formatting import WPFLEET_THEME, console


def _render(renderable: object) -> str:
    wide = Console(theme=WPFLEET_THEME, width=200, record=True)
    with wide.capture() as capture:
        wide.print(renderable)
    return capture.get()


def _result(outcome: Outcome, returncode: int | None) -> OperationResult:
    return OperationResult(
        operation=CORE_UPDATE if outcome == Outcome.FAILURE else DB_REPAIR,
        site="/var/www/a.example",
        identity="md",
        outcome=outcome,
        returncode=returncode,
        output="",
        duration=0.5,
    )


class TestProblemsTable:
    """Tests for create_problems_table."""

    def test_site_with_brackets(self) -> None:
        result = OperationResult(
            operation=CORE_UPDATE,
            site="/srv/[bold]site",
            identity="md",
            outcome=Outcome.FAILURE,
            returncode=1,
            output="",
            duration=0.1,
        )

        assert "/srv/[bold]site" in _render(create_problems_table([result]))

    def test_rows(self) -> None:
        table = create_problems_table(
            [_result(Outcome.FAILURE, None), _result(Outcome.WARNING, 2)]
        )

        output = _render(table)
        assert table.row_count == 2
        assert "FAIL" in output
        assert "WARN" in output
        assert "core-update" in output
        assert "db-repair" in output


class TestSummaryTable:
    """Tests for create_summary_table."""

    def test_counts(self) -> None:
        stats = RunStats(mode="core", total_sites=3)
        stats.record_result(_result(Outcome.FAILURE, 1))
        stats.record_skip("/var/www/b", "directory does not exist")
        stats.record_site("/var/www/a.example", 12.0)
        stats.duration = 12.3

        output = _render(create_summary_table(stats))

        assert "Run Summary (core)" in output
        assert "/var/www/a.example (12.0s)" in output
        assert "12.3s" in output


class TestPrintRunSummary:
    """Tests for print_run_summary."""

    def test_clean_run(self, tmp_path: Path) -> None:
        stats = RunStats(mode="plugins", total_sites=1)
        stats.record_result(_result(Outcome.SUCCESS, 0))

        with console.capture() as capture:
            print_run_summary(stats, tmp_path / "wpfleet.log")

        output = capture.get()
        assert "All sites maintained successfully." in output
        assert "Operation output is logged to" in output

    def test_skips_and_problems_listed(self) -> None:
        stats = RunStats(mode="core", total_sites=2)
        stats.record_result(_result(Outcome.FAILURE, 1))
        stats.record_skip("/var/www/b", "all identity strategies exhausted")

        with console.capture() as capture:
            print_run_summary(stats)

        output = capture.get()
        assert "Skipped sites:" in output
        assert "all identity strategies exhausted" in output
        assert "Problems" in output
        assert "All sites maintained" not in output

    def test_bracketed_paths_printed_literally(self) -> None:
        """Square brackets in paths and reasons are not read as markup."""
        stats = RunStats(mode="core", total_sites=1)
        stats.record_skip("/srv/[old]/a", "owner [root]")

        with console.capture() as capture:
            print_run_summary(stats)

        output = capture.get()
        assert "/srv/[old]/a" in output
        assert "(owner [root])" in output
