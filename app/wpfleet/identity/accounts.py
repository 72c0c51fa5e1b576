"""System account lookups used by the identity resolver.

The resolver only needs two questions answered: does an account exist,
and who owns a path. Keeping them behind AccountDirectory lets tests
describe ownership without chown and root privileges.
"""

import os
import pwd
from abc import ABC, abstractmethod

SUPERUSER = "root"


class AccountDirectory(ABC):
    """Answers account existence and file ownership questions."""

    @abstractmethod
    def exists(self, name: str) -> bool:
        """Check whether an account with this name exists."""

    @abstractmethod
    def owner_of(self, path: str) -> str | None:
        """Return the owning account name of a path.

        Returns:
            Account name, or None if the path cannot be examined or its
            uid has no account.
        """


class SystemAccounts(AccountDirectory):
    """AccountDirectory backed by the host's passwd database."""

    def exists(self, name: str) -> bool:
        if not name:
            return False
        try:
            pwd.getpwnam(name)
        except KeyError:
            return False
        return True

    def owner_of(self, path: str) -> str | None:
        try:
            uid = os.stat(path).st_uid
        except OSError:
            return None
        try:
            return pwd.getpwuid(uid).pw_name
        except KeyError:
            return None


def is_superuser(name: str) -> bool:
    """Check whether an account name is the superuser."""
    return name == SUPERUSER
