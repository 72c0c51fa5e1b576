"""Abstract base class for identity runners.

This module defines the IdentityRunner interface: run a command as
another system account and report how it ended. How the identity switch
is performed on a given host is left to the concrete runner.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of a command run under another identity.

    Attributes:
        returncode: Exit status of the command.
        output: Combined stdout and stderr.
        duration: Wall-clock seconds until the command exited.
    """

    returncode: int
    output: str
    duration: float

    @property
    def success(self) -> bool:
        """Check if the command exited with 0."""
        return self.returncode == 0


class IdentityRunner(ABC):
    """Runs commands as a given system account.

    Attributes:
        dry_run: If True, callers should not execute anything.

    Example:
        >>> runner = SuRunner()
        >>> if runner.is_available():
        ...     result = runner.run_as("md", ["wp", "core", "version"], cwd="/var/www/md")
        ...     print(result.returncode, result.output)
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the runner.

        Args:
            dry_run: If True, only describe commands without executing them.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if runner is in dry-run mode."""
        return self._dry_run

    @abstractmethod
    def is_available(self) -> bool:
        """Check if identity switching is possible on this host."""

    @abstractmethod
    def describe(
        self,
        identity: str,
        args: list[str],
        *,
        cwd: str,
        env: dict[str, str] | None = None,
    ) -> list[str]:
        """Return the exact argument vector ``run_as`` would execute."""

    @abstractmethod
    def run_as(
        self,
        identity: str,
        args: list[str],
        *,
        cwd: str,
        env: dict[str, str] | None = None,
    ) -> ExecutionResult:
        """Run a command as ``identity`` and wait for it to exit.

        There is no timeout: a hung command blocks the caller.

        Args:
            identity: Account name to run as.
            args: Command and arguments.
            cwd: Working directory for the command.
            env: Extra environment variables for the command.

        Returns:
            ExecutionResult with exit status, combined output and duration.

        Raises:
            FileNotFoundError: If the identity switching tool is missing.
        """
