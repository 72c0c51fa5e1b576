"""Identity resolution for WordPress installations.

Maintenance must run as the unprivileged account that owns a site, so
that files written by updates keep the right ownership. The account is
chosen by a fixed cascade; earlier strategies rely on actual filesystem
ownership and are more authoritative than the naming conventions used by
later ones, so the order must not change.
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum

from wpfleet.core.errors import IdentityResolutionError
from wpfleet.discovery.markers import PRIMARY_MARKER
from wpfleet.identity.accounts import AccountDirectory, SystemAccounts, is_superuser
from wpfleet.identity.credentials import extract_constant
from wpfleet.models.site import SiteEntry

logger = logging.getLogger(__name__)

DEFAULT_SEGMENT_INDEX = 3
DEFAULT_CREDENTIAL_CONSTANT = "DB_USER"


class IdentitySource(str, Enum):
    """Strategy that produced a resolved identity."""

    OVERRIDE = "override"
    CONFIG_OWNER = "config_owner"
    DIRECTORY_OWNER = "directory_owner"
    PATH_SEGMENT = "path_segment"
    CONFIG_CREDENTIAL = "config_credential"


@dataclass(frozen=True, slots=True)
class ResolvedIdentity:
    """An existing, non-superuser account to run operations as.

    Attributes:
        name: Account name.
        source: Strategy that produced it.
    """

    name: str
    source: IdentitySource


class IdentityResolver:
    """Determines which account maintains an installation.

    Cascade, first success wins:

    0. The registry's user override, if given (must exist).
    1. Owner of ``wp-config.php``, unless it is the superuser.
    2. Owner of the installation root, unless it is the superuser.
    3. The path segment at ``segment_index`` of ``path.split("/")``.
    4. The ``DB_USER`` literal from ``wp-config.php``.

    Strategies 3 and 4 are not filtered for the superuser inside the
    cascade; a superuser produced by them is rejected by a final check
    and logged, so a resolved identity is never ``root``.

    Args:
        accounts: Account lookups. Defaults to the host's passwd database.
        segment_index: Path segment tried by strategy 3.
        credential_constant: Constant read by strategy 4.
    """

    def __init__(
        self,
        accounts: AccountDirectory | None = None,
        *,
        segment_index: int = DEFAULT_SEGMENT_INDEX,
        credential_constant: str = DEFAULT_CREDENTIAL_CONSTANT,
    ) -> None:
        self._accounts = accounts if accounts is not None else SystemAccounts()
        self._segment_index = segment_index
        self._credential_constant = credential_constant

    def resolve(self, entry: SiteEntry) -> ResolvedIdentity:
        """Resolve the account for a registry entry.

        Args:
            entry: Registry entry; its path must be an existing directory.

        Returns:
            ResolvedIdentity naming an existing non-superuser account.

        Raises:
            IdentityResolutionError: If every strategy fails.
        """
        path = entry.path

        if entry.user:
            return self._from_override(path, entry.user)

        identity = (
            self._from_config_owner(path)
            or self._from_directory_owner(path)
            or self._from_path_segment(path)
            or self._from_config_credential(path)
        )
        if identity is None:
            raise IdentityResolutionError(path, "all identity strategies exhausted")

        if is_superuser(identity.name):
            logger.warning(
                "Refusing superuser identity %r for %s (from %s)",
                identity.name,
                path,
                identity.source.value,
            )
            raise IdentityResolutionError(path, f"{identity.source.value} yielded the superuser")

        logger.debug("Resolved %s to %s via %s", path, identity.name, identity.source.value)
        return identity

    def _from_override(self, path: str, user: str) -> ResolvedIdentity:
        if is_superuser(user):
            raise IdentityResolutionError(path, "registry override names the superuser")
        if not self._accounts.exists(user):
            raise IdentityResolutionError(path, f"registry override {user!r} is not an account")
        return ResolvedIdentity(name=user, source=IdentitySource.OVERRIDE)

    def _usable_owner(self, target: str) -> str | None:
        owner = self._accounts.owner_of(target)
        if owner is None or is_superuser(owner):
            return None
        if not self._accounts.exists(owner):
            return None
        return owner

    def _from_config_owner(self, path: str) -> ResolvedIdentity | None:
        config_path = os.path.join(path, PRIMARY_MARKER)
        if not os.path.isfile(config_path):
            return None
        owner = self._usable_owner(config_path)
        if owner is None:
            return None
        return ResolvedIdentity(name=owner, source=IdentitySource.CONFIG_OWNER)

    def _from_directory_owner(self, path: str) -> ResolvedIdentity | None:
        owner = self._usable_owner(path)
        if owner is None:
            return None
        return ResolvedIdentity(name=owner, source=IdentitySource.DIRECTORY_OWNER)

    def _from_path_segment(self, path: str) -> ResolvedIdentity | None:
        # "/var/www/md/data" splits to ["", "var", "www", "md", "data"]
        segments = path.split("/")
        if self._segment_index >= len(segments):
            return None
        candidate = segments[self._segment_index]
        if not candidate or not self._accounts.exists(candidate):
            return None
        return ResolvedIdentity(name=candidate, source=IdentitySource.PATH_SEGMENT)

    def _from_config_credential(self, path: str) -> ResolvedIdentity | None:
        config_path = os.path.join(path, PRIMARY_MARKER)
        try:
            with open(config_path, encoding="utf-8", errors="replace") as f:
                contents = f.read()
        except OSError:
            return None

        candidate = extract_constant(contents, self._credential_constant)
        if candidate is None or not self._accounts.exists(candidate):
            return None
        return ResolvedIdentity(name=candidate, source=IdentitySource.CONFIG_CREDENTIAL)
