"""Maintenance modes and WP-CLI operation models.

A mode is a fixed, ordered tuple of operations. The order matters: core
files are updated before the database schema is migrated, and database
repair and cache work run after every update.
"""

from dataclasses import dataclass
from enum import Enum


class Mode(str, Enum):
    """Named maintenance mode selected once per run.

    Attributes:
        FULL: Update everything, migrate and tidy the database, run cron.
        PLUGINS: Update all plugins.
        THEMES: Update all themes.
        CORE: Update core and migrate its database schema.
        DATABASE: Optimize and repair the database.
        CRON: Run due cron events.
        CACHE: Flush the object cache.
    """

    FULL = "full"
    PLUGINS = "plugins"
    THEMES = "themes"
    CORE = "core"
    DATABASE = "database"
    CRON = "cron"
    CACHE = "cache"


@dataclass(frozen=True, slots=True)
class Operation:
    """A single WP-CLI invocation applied to one site.

    Attributes:
        name: Stable identifier used in logs and reports.
        args: WP-CLI verb, sub-verb and flags.
        needs_url: Pass the site URL so WP-CLI boots the right site.
    """

    name: str
    args: tuple[str, ...]
    needs_url: bool = False

    def __post_init__(self) -> None:
        """Validate operation data after initialization."""
        if not self.args:
            msg = f"Operation {self.name!r} has no WP-CLI arguments"
            raise ValueError(msg)

    @property
    def command_line(self) -> str:
        """Human-readable WP-CLI command."""
        return "wp " + " ".join(self.args)


CORE_UPDATE = Operation("core-update", ("core", "update"))
PLUGIN_UPDATE_ALL = Operation("plugin-update-all", ("plugin", "update", "--all"))
THEME_UPDATE_ALL = Operation("theme-update-all", ("theme", "update", "--all"))
CORE_MIGRATE_DB = Operation("core-migrate-db", ("core", "update-db"))
DB_OPTIMIZE = Operation("db-optimize", ("db", "optimize"))
DB_REPAIR = Operation("db-repair", ("db", "repair"))
CRON_RUN_DUE = Operation("cron-run-due", ("cron", "event", "run", "--due-now"), needs_url=True)
CACHE_FLUSH = Operation("cache-flush", ("cache", "flush"), needs_url=True)

MODE_OPERATIONS: dict[Mode, tuple[Operation, ...]] = {
    Mode.FULL: (
        CORE_UPDATE,
        PLUGIN_UPDATE_ALL,
        THEME_UPDATE_ALL,
        CORE_MIGRATE_DB,
        DB_OPTIMIZE,
        DB_REPAIR,
        CRON_RUN_DUE,
    ),
    Mode.PLUGINS: (PLUGIN_UPDATE_ALL,),
    Mode.THEMES: (THEME_UPDATE_ALL,),
    Mode.CORE: (CORE_UPDATE, CORE_MIGRATE_DB),
    Mode.DATABASE: (DB_OPTIMIZE, DB_REPAIR),
    Mode.CRON: (CRON_RUN_DUE,),
    Mode.CACHE: (CACHE_FLUSH,),
}

_missing_modes = set(Mode) - set(MODE_OPERATIONS)
if _missing_modes:
    raise RuntimeError(f"Modes without operations: {sorted(m.value for m in _missing_modes)}")


def operations_for(mode: Mode) -> tuple[Operation, ...]:
    """Return the ordered operations of a mode."""
    return MODE_OPERATIONS[mode]


class Outcome(str, Enum):
    """Classification of a finished operation.

    Attributes:
        SUCCESS: WP-CLI exited with 0.
        WARNING: WP-CLI exited with a recoverable code.
        FAILURE: Any other non-zero exit.
        SKIPPED: Not executed (dry run).
    """

    SUCCESS = "success"
    WARNING = "warning"
    FAILURE = "failure"
    SKIPPED = "skipped"


def classify_exit(returncode: int, warning_codes: frozenset[int]) -> Outcome:
    """Map a WP-CLI exit status to an outcome.

    Args:
        returncode: Process exit status.
        warning_codes: Non-zero codes treated as recoverable warnings.

    Returns:
        SUCCESS for 0, WARNING for a listed code, FAILURE otherwise.
    """
    if returncode == 0:
        return Outcome.SUCCESS
    if returncode in warning_codes:
        return Outcome.WARNING
    return Outcome.FAILURE


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Result of running one operation against one site.

    Attributes:
        operation: The operation that was run.
        site: Installation root.
        identity: Account the operation ran as.
        outcome: Classified result.
        returncode: WP-CLI exit status (None when not executed).
        output: Combined stdout/stderr of the invocation.
        duration: Wall-clock seconds spent.
    """

    operation: Operation
    site: str
    identity: str
    outcome: Outcome
    returncode: int | None
    output: str
    duration: float

    @property
    def failed(self) -> bool:
        """Check if the operation failed."""
        return self.outcome == Outcome.FAILURE
