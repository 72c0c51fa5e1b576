"""Identity runner based on su(1).

Uses a login shell of the target account, like ``su - user -c ...``,
so the account's own profile and PATH apply to WP-CLI.
"""

import logging
import os
import shlex
import time

from wpfleet.operators.base import ExecutionResult, IdentityRunner
from wpfleet.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)


class SuRunner(IdentityRunner):
    """Runs commands through ``su - <account> -s /bin/sh -c``.

    Requires root; su does not ask root for a password. The shell is
    forced to /bin/sh because hosting accounts often have a nologin
    shell.
    """

    SHELL = "/bin/sh"

    def is_available(self) -> bool:
        """Check that su exists and we are allowed to switch to any account."""
        return command_exists("su") and os.geteuid() == 0

    def describe(
        self,
        identity: str,
        args: list[str],
        *,
        cwd: str,
        env: dict[str, str] | None = None,
    ) -> list[str]:
        assignments = [f"{key}={value}" for key, value in (env or {}).items()]
        command = shlex.join(["env", *assignments, *args]) if assignments else shlex.join(args)
        script = f"cd {shlex.quote(cwd)} && {command}"
        return ["su", "-", identity, "-s", self.SHELL, "-c", script]

    def run_as(
        self,
        identity: str,
        args: list[str],
        *,
        cwd: str,
        env: dict[str, str] | None = None,
    ) -> ExecutionResult:
        command = self.describe(identity, args, cwd=cwd, env=env)
        logger.debug("Executing as %s: %s", identity, shlex.join(command))

        started = time.monotonic()
        result = run_command(command, timeout=None, combine_output=True)
        return ExecutionResult(
            returncode=result.returncode,
            output=result.output,
            duration=time.monotonic() - started,
        )
