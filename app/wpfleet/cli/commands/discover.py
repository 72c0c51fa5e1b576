"""Discover command implementation.

Scans web roots for WordPress installations and writes the results to
the site registry.
"""

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from wpfleet.cli.types import EXIT_INTERRUPTED, OutputFormat, build_guard, get_config
from wpfleet.core.errors import LockHeldError, RegistryError
from wpfleet.core.guard import interrupt_on_sigterm
from wpfleet.core.registry import SiteRegistry, merge_discovered
from wpfleet.discovery.exclusions import ExclusionMatcher
from wpfleet.discovery.metadata import enrich_all
from wpfleet.discovery.models import ScanSummary, SiteMetadata
from wpfleet.discovery.scanner import InstallationScanner
from wpfleet.models.site import SiteEntry
from wpfleet.utils.formatting import (
    console,
    create_sites_table,
    print_error,
    print_info,
    print_success,
)

app = typer.Typer(
    help="Discover WordPress installations.",
    invoke_without_command=True,
    # Groups stop option parsing at the first positional; roots come first
    context_settings={"allow_interspersed_args": True},
)

# Number of sites listed before the table is truncated
_PREVIEW_LIMIT = 10


@app.callback(invoke_without_command=True)
def discover_sites(
    ctx: typer.Context,
    roots: Annotated[
        list[str] | None,
        typer.Argument(
            help="Directories to scan (default: roots from config, /var/www).",
            show_default=False,
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Registry file to write (default: configured registry).",
        ),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option(
            "--exclude",
            "-x",
            help="Absolute directory or glob pattern to skip. Repeatable.",
        ),
    ] = None,
    max_depth: Annotated[
        int | None,
        typer.Option(
            "--max-depth",
            min=1,
            help="Deepest directory level examined below each root.",
        ),
    ] = None,
    merge: Annotated[
        bool,
        typer.Option(
            "--merge",
            help="Keep user/domain overrides of sites already in the registry.",
        ),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Scan directories for WordPress installations and save the registry.

    An installation must have both wp-config.php and wp-includes/version.php.

    Examples:
        wpfleet discover                                # Scan configured roots
        wpfleet discover /var/www /srv/www              # Scan given roots
        wpfleet discover -x '*/backups*' -x /var/www/old
        wpfleet discover --output sites.txt --merge
    """
    config = get_config(ctx)
    scan_roots = roots or config.roots
    patterns = [*config.exclude, *(exclude or [])]

    try:
        matcher = ExclusionMatcher.from_patterns(patterns)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    scanner = InstallationScanner(
        max_depth=max_depth or config.max_depth,
        matcher=matcher,
    )
    registry = SiteRegistry(output or config.effective_registry_path)

    interrupt_on_sigterm()
    try:
        with build_guard(config):
            summary = scanner.discover(scan_roots)
            if summary.roots_scanned:
                registry.save(_build_entries(registry, summary.sites, merge))
    except LockHeldError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except RegistryError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except KeyboardInterrupt:
        print_error("Discovery interrupted.")
        raise typer.Exit(code=EXIT_INTERRUPTED) from None

    if not summary.roots_scanned:
        print_error(f"None of the scan roots exist: {', '.join(summary.roots_missing)}")
        raise typer.Exit(code=1)

    records = enrich_all(summary.sites)

    if output_format == OutputFormat.JSON:
        _print_json(records, registry.path)
        return

    if not records:
        print_info("No WordPress installations found.")
        print_info(f"Empty registry written to {registry.path}")
        return

    _print_table(records)
    _print_summary(summary, registry.path)


def _build_entries(registry: SiteRegistry, sites: list[str], merge: bool) -> list[SiteEntry]:
    """Turn discovered paths into registry entries."""
    if merge and registry.exists():
        return merge_discovered(registry.load(), sites)
    return [SiteEntry(path=path) for path in sites]


def _print_table(records: list[SiteMetadata]) -> None:
    """Display discovered sites as a Rich table."""
    table = create_sites_table()
    for record in records[:_PREVIEW_LIMIT]:
        table.add_row(escape(record.path), record.owner, record.group, record.mtime)
    console.print(table)

    if len(records) > _PREVIEW_LIMIT:
        console.print(f"[dim](showing {_PREVIEW_LIMIT} of {len(records)})[/dim]")


def _print_summary(summary: ScanSummary, registry_path: Path) -> None:
    """Print counts and the registry location."""
    print_success(f"Found {len(summary.sites)} unique WordPress installation(s)")
    details = [f"{summary.markers_examined} marker files"]
    if summary.directories_pruned:
        details.append(f"{summary.directories_pruned} excluded directories")
    if summary.candidates_rejected:
        details.append(f"{summary.candidates_rejected} incomplete candidates rejected")
    if summary.directories_unreadable:
        details.append(f"{summary.directories_unreadable} unreadable directories")
    console.print(f"[dim]Examined {', '.join(details)}[/dim]")
    print_info(f"Registry saved to {registry_path}")


def _print_json(records: list[SiteMetadata], registry_path: Path) -> None:
    """Display discovered sites as JSON."""
    data = {
        "registry": str(registry_path),
        "sites": [record.to_dict() for record in records],
    }
    console.print_json(json.dumps(data))
