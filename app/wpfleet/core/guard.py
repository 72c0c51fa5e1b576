"""Single-instance guard for maintenance runs.

Two checks protect a host from overlapping runs. The lock file is the
authoritative one: it is created exclusively and records the holder's
pid. The process census is a secondary heuristic that catches a
long-running instance whose lock lives elsewhere (e.g. started with a
different configuration). Brief overlap, such as a scheduler racing
itself at restart, is tolerated.
"""

import atexit
import logging
import os
import re
import signal
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from types import FrameType

from wpfleet.core.errors import LockHeldError
from wpfleet.core.paths import APP_NAME
from wpfleet.utils.shell import run_command

logger = logging.getLogger(__name__)

DEFAULT_GRACE_SECONDS = 30

# python, python3, python3.12 ...
_INTERPRETER = re.compile(r"^python[\d.]*$")


@dataclass(frozen=True, slots=True)
class ProcessInfo:
    """A running instance of this tool.

    Attributes:
        pid: Process id.
        elapsed: Seconds since the process started.
        command: Command line, for messages.
    """

    pid: int
    elapsed: int
    command: str = ""


class ProcessCensus(ABC):
    """Lists other running instances of this tool."""

    @abstractmethod
    def instances(self) -> list[ProcessInfo]:
        """Return running instances, excluding the current process."""


class PsCensus(ProcessCensus):
    """ProcessCensus backed by ``ps``.

    Args:
        name: Executable name identifying this tool in a command line.
    """

    def __init__(self, name: str = APP_NAME) -> None:
        self._name = name

    def instances(self) -> list[ProcessInfo]:
        try:
            result = run_command(["ps", "-eo", "pid=,etimes=,args="], timeout=10.0)
        except (FileNotFoundError, OSError) as e:
            logger.warning("Cannot list processes, skipping census: %s", e)
            return []
        if not result.success:
            logger.warning("ps failed, skipping census: %s", result.stderr.strip())
            return []

        own = {os.getpid(), os.getppid()}
        found: list[ProcessInfo] = []
        for line in result.stdout.splitlines():
            info = self._parse_line(line)
            if info is None or info.pid in own:
                continue
            found.append(info)
        return found

    def _parse_line(self, line: str) -> ProcessInfo | None:
        parts = line.split(None, 2)
        if len(parts) < 3:
            return None
        try:
            pid, elapsed = int(parts[0]), int(parts[1])
        except ValueError:
            return None
        command = parts[2]
        if not self._runs_tool(command.split()):
            return None
        return ProcessInfo(pid=pid, elapsed=elapsed, command=command)

    def _runs_tool(self, argv: list[str]) -> bool:
        """Check the executable position only, so wrappers like sh -c do not count."""
        program = os.path.basename(argv[0])
        if program == self._name:
            return True
        if _INTERPRETER.match(program) and len(argv) > 1:
            return os.path.basename(argv[1]) == self._name
        return False


@dataclass(frozen=True, slots=True)
class RunToken:
    """Proof that the current process holds the run lock.

    Attributes:
        pid: Holder process id.
        lock_path: Lock file created for this run.
        acquired_at: ISO 8601 acquisition time.
    """

    pid: int
    lock_path: Path
    acquired_at: str


class ExecutionGuard:
    """Prevents overlapping runs on one host.

    Usable as a context manager; the lock is released on normal exit,
    on exceptions (including KeyboardInterrupt) and at interpreter exit.

    Args:
        lock_path: Lock file location.
        census: Process census. None disables the census check.
        grace_seconds: Concurrent instances younger than this are tolerated.
    """

    def __init__(
        self,
        lock_path: Path,
        *,
        census: ProcessCensus | None = None,
        grace_seconds: int = DEFAULT_GRACE_SECONDS,
    ) -> None:
        self._lock_path = lock_path
        self._census = census
        self._grace_seconds = grace_seconds
        self._token: RunToken | None = None

    @property
    def token(self) -> RunToken | None:
        """Current token, or None when the lock is not held."""
        return self._token

    def acquire(self) -> RunToken:
        """Take the run lock.

        Returns:
            RunToken for this process.

        Raises:
            LockHeldError: If another instance has been running longer than
                the grace period, or the lock file already exists.
        """
        if self._token is not None:
            return self._token

        if self._census is not None:
            for instance in self._census.instances():
                if instance.elapsed > self._grace_seconds:
                    msg = (
                        f"Another {APP_NAME} instance (pid {instance.pid}) has been "
                        f"running for {instance.elapsed}s"
                    )
                    raise LockHeldError(msg)
                logger.debug(
                    "Tolerating young instance pid %d (%ds old)", instance.pid, instance.elapsed
                )

        self._lock_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd = os.open(self._lock_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
        except FileExistsError:
            holder = self._read_holder()
            msg = f"Lock file {self._lock_path} is held by pid {holder or 'unknown'}"
            raise LockHeldError(msg) from None

        pid = os.getpid()
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(f"{pid}\n")
            self._token = RunToken(
                pid=pid,
                lock_path=self._lock_path,
                acquired_at=datetime.now(UTC).isoformat(),
            )
            atexit.register(self.release)
        except BaseException:
            # Interrupted between creating the file and recording ownership
            self._token = None
            self._lock_path.unlink(missing_ok=True)
            raise
        logger.debug("Acquired run lock %s", self._lock_path)
        return self._token

    def release(self) -> None:
        """Remove the lock file if this guard created it. Idempotent."""
        if self._token is None:
            return

        token = self._token
        self._token = None
        atexit.unregister(self.release)

        if self._read_holder() != str(token.pid):
            logger.warning("Lock file %s no longer belongs to this run", self._lock_path)
            return
        try:
            self._lock_path.unlink()
        except FileNotFoundError:
            return
        logger.debug("Released run lock %s", self._lock_path)

    def _read_holder(self) -> str | None:
        try:
            return self._lock_path.read_text(encoding="utf-8").strip() or None
        except OSError:
            return None

    def __enter__(self) -> RunToken:
        return self.acquire()

    def __exit__(self, *_exc: object) -> None:
        self.release()


def _raise_interrupt(signum: int, _frame: FrameType | None) -> None:
    raise KeyboardInterrupt(f"signal {signum}")


def interrupt_on_sigterm() -> None:
    """Turn SIGTERM into KeyboardInterrupt so cleanup paths run."""
    signal.signal(signal.SIGTERM, _raise_interrupt)
