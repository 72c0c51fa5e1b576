"""Run command implementation.

Applies a maintenance mode to every site in the registry, each site
under its own account.
"""

from pathlib import Path
from typing import Annotated

import typer

from wpfleet.cli.display import print_run_summary
from wpfleet.cli.types import EXIT_INTERRUPTED, build_guard, get_config
from wpfleet.core.errors import EnvironmentCheckError, RegistryError
from wpfleet.core.guard import interrupt_on_sigterm
from wpfleet.core.orchestrator import Orchestrator, check_environment
from wpfleet.core.registry import SiteRegistry
from wpfleet.identity.resolver import IdentityResolver
from wpfleet.models.operation import Mode, operations_for
from wpfleet.operators.su import SuRunner
from wpfleet.operators.wpcli import WpCli
from wpfleet.utils.formatting import console, print_error, print_info, print_warning

app = typer.Typer(
    help="Run WP-CLI maintenance on registered sites.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def run_maintenance(
    ctx: typer.Context,
    mode: Annotated[
        Mode | None,
        typer.Option(
            "--mode",
            "-m",
            help="Maintenance mode to run.",
            case_sensitive=False,
        ),
    ] = None,
    registry_path: Annotated[
        Path | None,
        typer.Option(
            "--registry",
            "-r",
            help="Registry file to read (default: configured registry).",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show the commands without executing them."),
    ] = False,
    self_update: Annotated[
        bool,
        typer.Option("--self-update", help="Update WP-CLI itself before the run."),
    ] = False,
) -> None:
    """Run a maintenance mode on every site in the registry.

    Sites are processed in registry order and operations in mode order.
    A site whose owner cannot be determined is skipped; a failing
    operation does not stop the others.

    Examples:
        wpfleet run --mode full
        wpfleet run --mode plugins --dry-run
        wpfleet run -m database -r /etc/wpfleet/sites.txt
    """
    if mode is None:
        choices = ", ".join(m.value for m in Mode)
        print_error(f"No mode selected. Use --mode with one of: {choices}")
        raise typer.Exit(code=1)

    config = get_config(ctx)
    log_file = ctx.obj.get("log_file") if isinstance(ctx.obj, dict) else None

    wp_cli = WpCli(config.wp_cli)
    runner = SuRunner(dry_run=dry_run)

    try:
        check_environment(wp_cli, runner)
    except EnvironmentCheckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    registry = SiteRegistry(registry_path or config.effective_registry_path)
    resolver = IdentityResolver(
        segment_index=config.identity_segment_index,
        credential_constant=config.credential_constant,
    )
    orchestrator = Orchestrator(
        runner,
        resolver,
        wp_cli,
        warning_exit_codes=config.warning_exit_codes,
    )

    interrupt_on_sigterm()
    try:
        with build_guard(config):
            entries = registry.load()
            if not entries:
                print_info(f"No sites in registry {registry.path}. Run 'wpfleet discover' first.")
                return

            operations = ", ".join(op.name for op in operations_for(mode))
            console.print(
                f"[info]Running[/info] [bold]{mode.value}[/bold] on {len(entries)} site(s): "
                f"[muted]{operations}[/muted]"
            )

            if self_update and not dry_run:
                _update_wp_cli(wp_cli)

            stats = orchestrator.run(entries, mode)
    except EnvironmentCheckError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except RegistryError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except KeyboardInterrupt:
        print_error("Run interrupted. Re-run the command to process all sites.")
        raise typer.Exit(code=EXIT_INTERRUPTED) from None

    print_run_summary(stats, log_file)


def _update_wp_cli(wp_cli: WpCli) -> None:
    """Self-update WP-CLI; a failure is reported but not fatal."""
    try:
        result = wp_cli.self_update()
    except OSError as e:
        print_warning(f"WP-CLI self-update failed: {e}")
        return
    if not result.success:
        print_warning(f"WP-CLI self-update exited with {result.returncode}")
