"""WP-CLI command construction.

Builds the argument vector and environment for one operation against one
site. WP-CLI itself is treated as an opaque executable.
"""

import logging
import shutil

from wpfleet.models.operation import Operation
from wpfleet.models.site import SiteEntry
from wpfleet.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)


class WpCli:
    """The external WordPress maintenance tool.

    Args:
        executable: Command name or path of WP-CLI.
    """

    def __init__(self, executable: str = "wp") -> None:
        self._executable = executable

    @property
    def executable(self) -> str:
        """Absolute path of the executable when found on PATH.

        ``su -`` resets PATH to the target account's login PATH, so the
        path is pinned here, as seen by the invoking user.
        """
        return shutil.which(self._executable) or self._executable

    def is_available(self) -> bool:
        """Check if the WP-CLI executable can be found."""
        return shutil.which(self._executable) is not None

    def build_args(self, site: SiteEntry, operation: Operation) -> list[str]:
        """Build the WP-CLI argument vector for an operation.

        Args:
            site: Target installation.
            operation: Operation to run.

        Returns:
            Argument list starting with the executable.
        """
        args = [self.executable, f"--path={site.path}", *operation.args]
        if operation.needs_url:
            args.append(f"--url={site.effective_domain}")
        return args

    @staticmethod
    def build_env(site: SiteEntry) -> dict[str, str]:
        """Environment exported for every operation of a site."""
        return {
            "HOMEDIR": site.home_dir,
            "HTTP_HOST": site.effective_domain,
        }

    def self_update(self) -> CommandResult:
        """Update WP-CLI itself, as root.

        Returns:
            CommandResult of ``wp cli update --yes --allow-root``.

        Raises:
            FileNotFoundError: If the executable is missing.
        """
        logger.info("Updating WP-CLI (%s)", self.executable)
        return run_command(
            [self.executable, "cli", "update", "--yes", "--allow-root"],
            timeout=None,
            combine_output=True,
        )
