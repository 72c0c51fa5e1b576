"""Ownership and timestamp lookups for discovered installations."""

import grp
import logging
import os
import pwd
from datetime import UTC, datetime

from wpfleet.discovery.models import UNKNOWN, SiteMetadata

logger = logging.getLogger(__name__)


def enrich(path: str) -> SiteMetadata:
    """Look up owner, group and modification time of an installation root.

    Every field is resolved on its own; a failed lookup yields ``UNKNOWN``
    for that field only.

    Args:
        path: Installation root.

    Returns:
        SiteMetadata for the path.
    """
    try:
        stat = os.stat(path)
    except OSError as e:
        logger.warning("Cannot stat %s: %s", path, e)
        return SiteMetadata(path=path)

    try:
        owner = pwd.getpwuid(stat.st_uid).pw_name
    except KeyError:
        logger.warning("No account for uid %d owning %s", stat.st_uid, path)
        owner = UNKNOWN

    try:
        group = grp.getgrgid(stat.st_gid).gr_name
    except KeyError:
        logger.warning("No group for gid %d owning %s", stat.st_gid, path)
        group = UNKNOWN

    try:
        mtime = datetime.fromtimestamp(stat.st_mtime, tz=UTC).isoformat()
    except (OverflowError, OSError, ValueError):
        logger.warning("Invalid modification time on %s", path)
        mtime = UNKNOWN

    return SiteMetadata(path=path, owner=owner, group=group, mtime=mtime)


def enrich_all(paths: list[str]) -> list[SiteMetadata]:
    """Enrich several paths, preserving order."""
    return [enrich(path) for path in paths]
