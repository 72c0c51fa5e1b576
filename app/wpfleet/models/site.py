"""Site registry entry model.

This module defines the SiteEntry structure that links an installation
root to optional identity and domain overrides.
"""

import os
from dataclasses import dataclass

# Separator between fields in a registry line
FIELD_DELIMITER = "|"


@dataclass(frozen=True, slots=True)
class SiteEntry:
    """A WordPress installation listed in the site registry.

    Attributes:
        path: Absolute installation root.
        user: Account override. None lets the identity resolver decide.
        domain: Domain override. Only honoured when it looks like a host
            name (contains a dot); otherwise the final path segment is used.
    """

    path: str
    user: str | None = None
    domain: str | None = None

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.path:
            msg = "Site path cannot be empty"
            raise ValueError(msg)
        if not os.path.isabs(self.path):
            msg = f"Site path must be absolute: {self.path}"
            raise ValueError(msg)

    @property
    def effective_domain(self) -> str:
        """Domain passed to WP-CLI as the site URL and HTTP host.

        ``/var/www/md/data/www/iya.ru`` yields ``iya.ru``.
        """
        if self.domain and "." in self.domain:
            return self.domain
        return os.path.basename(self.path.rstrip("/")) or self.path

    @property
    def home_dir(self) -> str:
        """Account home derived from the site path.

        The last two segments are dropped, so
        ``/var/www/md/data/www/iya.ru`` yields ``/var/www/md/data``.
        """
        parts = self.path.rstrip("/").split("/")
        return "/".join(parts[:-2]) or "/"

    def to_line(self) -> str:
        """Serialize to a registry line with trailing empty fields omitted."""
        fields = [self.path]
        if self.user or self.domain:
            fields.append(self.user or "")
        if self.domain:
            fields.append(self.domain)
        return f" {FIELD_DELIMITER} ".join(fields)
