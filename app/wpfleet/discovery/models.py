"""Discovery domain models.

This module defines the data structures produced by the installation
scanner and the metadata enricher.
"""

from dataclasses import dataclass, field
from enum import Enum

# Sentinel for metadata fields that could not be looked up
UNKNOWN = "unknown"


class DetectionStrategy(str, Enum):
    """How a candidate installation root is located.

    Attributes:
        ROOT_MARKER: wp-config.php found directly in a directory.
        THEME_MARKER: A theme's functions.php found below wp-content;
            the root is the path truncated at the wp-content anchor.
    """

    ROOT_MARKER = "root_marker"
    THEME_MARKER = "theme_marker"


@dataclass(frozen=True, slots=True)
class SiteMetadata:
    """Ownership and modification details for an installation root.

    Each field falls back to ``UNKNOWN`` on its own when the lookup for
    that field fails.

    Attributes:
        path: Installation root.
        owner: Owning account name.
        group: Owning group name.
        mtime: Last modification time in ISO 8601 (UTC).
    """

    path: str
    owner: str = UNKNOWN
    group: str = UNKNOWN
    mtime: str = UNKNOWN

    def to_dict(self) -> dict[str, str]:
        """Serialize to a dictionary for JSON output."""
        return {
            "path": self.path,
            "owner": self.owner,
            "group": self.group,
            "mtime": self.mtime,
        }


@dataclass(slots=True)
class ScanSummary:
    """Counters describing one discovery pass.

    Attributes:
        roots_scanned: Roots that existed and were walked.
        roots_missing: Roots skipped because they do not exist.
        directories_pruned: Directories removed by exclusion rules.
        directories_unreadable: Directories skipped on permission or I/O errors.
        markers_examined: Marker files inspected.
        candidates_rejected: Candidate roots that failed validation.
        sites: Sorted, unique installation roots.
    """

    roots_scanned: list[str] = field(default_factory=list)
    roots_missing: list[str] = field(default_factory=list)
    directories_pruned: int = 0
    directories_unreadable: int = 0
    markers_examined: int = 0
    candidates_rejected: int = 0
    sites: list[str] = field(default_factory=list)
