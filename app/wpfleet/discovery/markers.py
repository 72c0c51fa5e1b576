"""WordPress installation marker files.

An installation root is recognised by files at fixed positions relative
to it. The primary and secondary markers must both exist for a candidate
to be accepted; a lone wp-config.php is often a stale backup or a copy.
"""

import fnmatch
import os

# Primary configuration marker at the installation root
PRIMARY_MARKER = "wp-config.php"

# Independent corroborating marker, relative to the root
SECONDARY_MARKER = os.path.join("wp-includes", "version.php")

# Themed resource marker nested under the anchor directory
ANCHOR_DIR = "wp-content"
THEME_MARKER_NAME = "functions.php"
THEME_MARKER_PATTERN = f"*/{ANCHOR_DIR}/themes/*/{THEME_MARKER_NAME}"


def is_theme_marker(path: str) -> bool:
    """Check whether a file path is a theme's functions.php.

    Args:
        path: Absolute file path.

    Returns:
        True if the path matches ``*/wp-content/themes/*/functions.php``.
    """
    return fnmatch.fnmatchcase(path, THEME_MARKER_PATTERN)


def root_from_theme_marker(path: str) -> str | None:
    """Reconstruct the installation root from a theme marker path.

    The path is cut at the first ``/wp-content/`` segment, so
    ``/var/www/a/wp-content/themes/x/functions.php`` yields ``/var/www/a``.

    Args:
        path: Absolute path of a theme marker file.

    Returns:
        The installation root, or None if the anchor segment is absent
        or would leave an empty root.
    """
    anchor = f"/{ANCHOR_DIR}/"
    index = path.find(anchor)
    if index <= 0:
        return None
    return path[:index]


def is_valid_installation(root: str) -> bool:
    """Check that both required markers exist below a candidate root.

    Args:
        root: Candidate installation root.

    Returns:
        True if wp-config.php and wp-includes/version.php are both files.
    """
    return os.path.isfile(os.path.join(root, PRIMARY_MARKER)) and os.path.isfile(
        os.path.join(root, SECONDARY_MARKER)
    )
