"""Run statistics for a maintenance run.

RunStats is created by the orchestrator at the start of a run, filled in
as sites are processed and handed back to the caller for the report. It
is never stored between runs.
"""

from dataclasses import dataclass, field

from wpfleet.models.operation import OperationResult, Outcome


@dataclass(frozen=True, slots=True)
class SkippedSite:
    """A site that was not processed.

    Attributes:
        path: Installation root.
        reason: Why the site was skipped.
    """

    path: str
    reason: str


@dataclass(frozen=True, slots=True)
class SiteTiming:
    """Wall-clock time spent on one site."""

    path: str
    duration: float


@dataclass(slots=True)
class RunStats:
    """Counters and records of one orchestration run.

    Attributes:
        mode: Name of the mode that was run.
        total_sites: Registry entries attempted.
        processed_sites: Sites whose operations were dispatched.
        results: Every operation result, in execution order.
        skipped: Sites skipped with their reasons.
        longest_site: Slowest processed site, if any.
        duration: Wall-clock seconds for the whole run.
    """

    mode: str
    total_sites: int = 0
    processed_sites: int = 0
    results: list[OperationResult] = field(default_factory=list)
    skipped: list[SkippedSite] = field(default_factory=list)
    longest_site: SiteTiming | None = None
    duration: float = 0.0

    @property
    def skipped_sites(self) -> int:
        """Number of skipped sites."""
        return len(self.skipped)

    @property
    def operations(self) -> int:
        """Number of operations recorded."""
        return len(self.results)

    def count(self, outcome: Outcome) -> int:
        """Number of operations with the given outcome."""
        return sum(1 for r in self.results if r.outcome == outcome)

    @property
    def succeeded(self) -> int:
        return self.count(Outcome.SUCCESS)

    @property
    def warnings(self) -> int:
        return self.count(Outcome.WARNING)

    @property
    def failed(self) -> int:
        return self.count(Outcome.FAILURE)

    @property
    def has_failures(self) -> bool:
        """Check if any operation failed."""
        return self.failed > 0

    def record_result(self, result: OperationResult) -> None:
        """Add an operation result."""
        self.results.append(result)

    def record_skip(self, path: str, reason: str) -> None:
        """Record a site that was not processed."""
        self.skipped.append(SkippedSite(path=path, reason=reason))

    def record_site(self, path: str, duration: float) -> None:
        """Record a processed site and track the slowest one."""
        self.processed_sites += 1
        if self.longest_site is None or duration > self.longest_site.duration:
            self.longest_site = SiteTiming(path=path, duration=duration)
