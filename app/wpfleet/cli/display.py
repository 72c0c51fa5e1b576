"""Shared Rich display functions for maintenance runs.

Provides the table builders and summary printer used by the run
command.
"""

from pathlib import Path

from rich.markup import escape
from rich.table import Table

from wpfleet.models.operation import OperationResult, Outcome
from wpfleet.models.stats import RunStats
from wpfleet.utils.formatting import console, print_success

_OUTCOME_LABELS: dict[Outcome, str] = {
    Outcome.SUCCESS: "[success]OK[/success]",
    Outcome.WARNING: "[warning]WARN[/warning]",
    Outcome.FAILURE: "[error]FAIL[/error]",
    Outcome.SKIPPED: "[muted]DRY[/muted]",
}


def create_problems_table(results: list[OperationResult]) -> Table:
    """Create a Rich table of operations that did not succeed.

    Args:
        results: Operation results with warning or failure outcomes.

    Returns:
        Rich Table with Status, Site, Operation and Exit columns.
    """
    table = Table(
        title="Problems",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=6, justify="center")
    table.add_column("Site", no_wrap=True)
    table.add_column("Operation")
    table.add_column("Exit", justify="right")

    for result in results:
        table.add_row(
            _OUTCOME_LABELS[result.outcome],
            escape(result.site),
            result.operation.name,
            "-" if result.returncode is None else str(result.returncode),
        )

    return table


def create_summary_table(stats: RunStats) -> Table:
    """Create the end-of-run summary table.

    Args:
        stats: Statistics of the finished run.

    Returns:
        Two-column Rich table of totals.
    """
    table = Table(
        title=f"Run Summary ({stats.mode})",
        show_header=False,
        border_style="border",
    )
    table.add_column("Metric", style="bold_header")
    table.add_column("Value", justify="right")

    table.add_row("Sites", str(stats.total_sites))
    table.add_row("Processed", str(stats.processed_sites))
    table.add_row("Skipped", f"[warning]{stats.skipped_sites}[/warning]" if stats.skipped else "0")
    table.add_row("Operations OK", f"[success]{stats.succeeded}[/success]")
    table.add_row("Warnings", f"[warning]{stats.warnings}[/warning]")
    table.add_row("Failures", f"[error]{stats.failed}[/error]" if stats.failed else "0")
    skipped_ops = stats.count(Outcome.SKIPPED)
    if skipped_ops:
        table.add_row("Dry-run operations", str(skipped_ops))
    if stats.longest_site is not None:
        table.add_row(
            "Longest site",
            f"{escape(stats.longest_site.path)} ({stats.longest_site.duration:.1f}s)",
        )
    table.add_row("Duration", f"{stats.duration:.1f}s")
    return table


def print_run_summary(stats: RunStats, log_file: Path | None = None) -> None:
    """Print skipped sites, problem operations and totals.

    Args:
        stats: Statistics of the finished run.
        log_file: Durable log holding per-operation output.
    """
    if stats.skipped:
        console.print("\n[warning]Skipped sites:[/warning]")
        for skipped in stats.skipped:
            console.print(
                f"  [muted]•[/muted] {escape(skipped.path)} "
                f"[muted]({escape(skipped.reason)})[/muted]"
            )

    problems = [r for r in stats.results if r.outcome in (Outcome.WARNING, Outcome.FAILURE)]
    if problems:
        console.print()
        console.print(create_problems_table(problems))

    console.print()
    console.print(create_summary_table(stats))

    if not problems and not stats.skipped and stats.total_sites:
        print_success("All sites maintained successfully.")
    if log_file is not None:
        console.print(f"[dim]Operation output is logged to {log_file}[/dim]")
