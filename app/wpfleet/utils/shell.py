"""Shell execution utilities.

Provides safe subprocess execution with proper error handling.
"""

import shutil
import subprocess
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command. When the command was run
            with ``combine_output=True`` this holds stdout and stderr
            interleaved as the process wrote them.
        stderr: Standard error from the command (empty when combined).
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0

    @property
    def output(self) -> str:
        """Return everything the command printed."""
        if self.stderr:
            return f"{self.stdout}{self.stderr}"
        return self.stdout


def run_command(
    args: list[str],
    *,
    timeout: float | None = 60.0,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
    combine_output: bool = False,
) -> CommandResult:
    """Execute a shell command and return the result.

    Output is decoded as UTF-8; bytes that do not decode are replaced
    with U+FFFD instead of raising.

    Args:
        args: Command and arguments to execute.
        timeout: Maximum time in seconds to wait for command. None waits
            for as long as the command runs.
        cwd: Working directory for the command. If None, uses current directory.
        env: Complete environment for the command. If None, inherits ours.
        combine_output: If True, capture stderr into the stdout stream.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        subprocess.TimeoutExpired: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    if combine_output:
        result = subprocess.run(
            args,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
            cwd=cwd,
            env=env,
        )
        return CommandResult(stdout=result.stdout or "", stderr="", returncode=result.returncode)

    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        timeout=timeout,
        cwd=cwd,
        env=env,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Absolute or relative paths are accepted as well and are checked
    for an executable file at that location.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None
