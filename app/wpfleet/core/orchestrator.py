"""Per-site maintenance orchestration.

Walks the registry in order, resolves the account of each site and runs
the operations of the selected mode through an identity runner. A site
that cannot be resolved is skipped, and an operation that fails does not
stop the remaining operations or sites. Only environment problems found
before the loop starts are fatal.
"""

from __future__ import annotations

import logging
import os
import shlex
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING

from wpfleet.core.errors import EnvironmentCheckError, IdentityResolutionError
from wpfleet.models.operation import (
    Mode,
    Operation,
    OperationResult,
    Outcome,
    classify_exit,
    operations_for,
)
from wpfleet.models.stats import RunStats

if TYPE_CHECKING:
    from wpfleet.identity.resolver import IdentityResolver, ResolvedIdentity
    from wpfleet.models.site import SiteEntry
    from wpfleet.operators.base import IdentityRunner
    from wpfleet.operators.wpcli import WpCli

logger = logging.getLogger(__name__)

DEFAULT_WARNING_EXIT_CODES: frozenset[int] = frozenset({2})


def check_environment(wp_cli: WpCli, runner: IdentityRunner) -> None:
    """Verify the host can run maintenance at all.

    Args:
        wp_cli: WP-CLI wrapper.
        runner: Identity runner that will execute operations.

    Raises:
        EnvironmentCheckError: If WP-CLI is missing, or identity switching
            is impossible outside dry-run mode.
    """
    if not wp_cli.is_available():
        msg = f"WP-CLI executable not found: {wp_cli.executable}"
        raise EnvironmentCheckError(msg)

    if not runner.dry_run and not runner.is_available():
        msg = "Root privileges and su are required to run operations as site owners"
        raise EnvironmentCheckError(msg)


class Orchestrator:
    """Runs a maintenance mode across registry entries.

    Args:
        runner: Executes commands as a site's account.
        resolver: Determines the account of each site.
        wp_cli: Builds WP-CLI invocations.
        warning_exit_codes: Exit codes counted as recoverable warnings.

    Example:
        >>> orchestrator = Orchestrator(SuRunner(), IdentityResolver(), WpCli())
        >>> stats = orchestrator.run(SiteRegistry().load(), Mode.PLUGINS)
        >>> stats.failed
        0
    """

    def __init__(
        self,
        runner: IdentityRunner,
        resolver: IdentityResolver,
        wp_cli: WpCli,
        *,
        warning_exit_codes: Iterable[int] = DEFAULT_WARNING_EXIT_CODES,
    ) -> None:
        self._runner = runner
        self._resolver = resolver
        self._wp_cli = wp_cli
        self._warning_codes = frozenset(warning_exit_codes)

    def run(self, entries: Iterable[SiteEntry], mode: Mode) -> RunStats:
        """Run every operation of ``mode`` on every entry, in order.

        Args:
            entries: Registry entries in registry order.
            mode: Maintenance mode.

        Returns:
            RunStats for this run.
        """
        operations = operations_for(mode)
        stats = RunStats(mode=mode.value)
        started = time.monotonic()

        logger.info(
            "Starting %s run: %s",
            mode.value,
            ", ".join(op.name for op in operations),
        )

        for entry in entries:
            stats.total_sites += 1

            if not os.path.isdir(entry.path):
                logger.warning("Site directory does not exist, skipping: %s", entry.path)
                stats.record_skip(entry.path, "directory does not exist")
                continue

            try:
                identity = self._resolver.resolve(entry)
            except IdentityResolutionError as e:
                logger.warning("Skipping site: %s", e)
                stats.record_skip(entry.path, e.reason)
                continue

            site_started = time.monotonic()
            self._process_site(entry, identity, operations, stats)
            stats.record_site(entry.path, time.monotonic() - site_started)

        stats.duration = time.monotonic() - started
        logger.info(
            "Finished %s run: %d sites, %d skipped, %d ok, %d warnings, %d failed",
            mode.value,
            stats.total_sites,
            stats.skipped_sites,
            stats.succeeded,
            stats.warnings,
            stats.failed,
        )
        return stats

    def _process_site(
        self,
        entry: SiteEntry,
        identity: ResolvedIdentity,
        operations: tuple[Operation, ...],
        stats: RunStats,
    ) -> None:
        logger.info(
            "Site %s (user %s via %s, domain %s)",
            entry.path,
            identity.name,
            identity.source.value,
            entry.effective_domain,
        )
        for operation in operations:
            result = self._execute(entry, identity.name, operation)
            stats.record_result(result)
            self._log_result(result)

    def _execute(self, entry: SiteEntry, identity: str, operation: Operation) -> OperationResult:
        """Run one operation and classify its exit status."""
        args = self._wp_cli.build_args(entry, operation)
        env = self._wp_cli.build_env(entry)

        if self._runner.dry_run:
            command = self._runner.describe(identity, args, cwd=entry.path, env=env)
            return OperationResult(
                operation=operation,
                site=entry.path,
                identity=identity,
                outcome=Outcome.SKIPPED,
                returncode=None,
                output=shlex.join(command),
                duration=0.0,
            )

        started = time.monotonic()
        try:
            execution = self._runner.run_as(identity, args, cwd=entry.path, env=env)
        except OSError as e:
            return OperationResult(
                operation=operation,
                site=entry.path,
                identity=identity,
                outcome=Outcome.FAILURE,
                returncode=None,
                output=f"Cannot execute {operation.command_line}: {e}",
                duration=time.monotonic() - started,
            )

        return OperationResult(
            operation=operation,
            site=entry.path,
            identity=identity,
            outcome=classify_exit(execution.returncode, self._warning_codes),
            returncode=execution.returncode,
            output=execution.output,
            duration=execution.duration,
        )

    @staticmethod
    def _log_result(result: OperationResult) -> None:
        name = result.operation.name
        if result.outcome == Outcome.SUCCESS:
            logger.info("  %s: ok (%.1fs)", name, result.duration)
            logger.debug("  %s output:\n%s", name, result.output.rstrip())
        elif result.outcome == Outcome.WARNING:
            logger.warning(
                "  %s: warning, exit %s (%.1fs)\n%s",
                name,
                result.returncode,
                result.duration,
                result.output.rstrip(),
            )
        elif result.outcome == Outcome.FAILURE:
            logger.error(
                "  %s: failed, exit %s (%.1fs)\n%s",
                name,
                result.returncode,
                result.duration,
                result.output.rstrip(),
            )
        else:
            logger.info("  %s: dry run: %s", name, result.output)
