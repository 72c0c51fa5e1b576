"""Filesystem scanner for WordPress installations.

Walks web roots looking for installation marker files, pruning excluded
subtrees before they are opened. Candidate roots are validated against
a second marker, deduplicated and returned sorted so repeated scans of
an unchanged tree produce identical output.
"""

import logging
import os
from collections.abc import Iterable, Sequence

from wpfleet.discovery.exclusions import ExclusionMatcher
from wpfleet.discovery.markers import (
    PRIMARY_MARKER,
    THEME_MARKER_NAME,
    is_theme_marker,
    is_valid_installation,
    root_from_theme_marker,
)
from wpfleet.discovery.models import DetectionStrategy, ScanSummary

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 8
DEFAULT_STRATEGIES: tuple[DetectionStrategy, ...] = (
    DetectionStrategy.ROOT_MARKER,
    DetectionStrategy.THEME_MARKER,
)


class InstallationScanner:
    """Discovers WordPress installation roots below a set of directories.

    Args:
        max_depth: Deepest level examined, counted like ``find -maxdepth``:
            a file directly inside a root is at depth 1.
        matcher: Exclusion rules applied before descending into a directory.
        strategies: Candidate detection strategies to use.
        progress_interval: Log a progress record every N marker files.

    Example:
        >>> scanner = InstallationScanner(max_depth=6)
        >>> scanner.scan(["/var/www"])
        ['/var/www/site-a']
    """

    def __init__(
        self,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        matcher: ExclusionMatcher | None = None,
        strategies: Iterable[DetectionStrategy] = DEFAULT_STRATEGIES,
        progress_interval: int = 1000,
    ) -> None:
        if max_depth < 1:
            msg = f"max_depth must be at least 1, got {max_depth}"
            raise ValueError(msg)
        self._max_depth = max_depth
        self._matcher = matcher if matcher is not None else ExclusionMatcher()
        self._strategies = frozenset(strategies)
        if not self._strategies:
            msg = "At least one detection strategy is required"
            raise ValueError(msg)
        self._progress_interval = progress_interval

    def scan(self, roots: Sequence[str]) -> list[str]:
        """Scan roots and return sorted, unique installation roots."""
        return self.discover(roots).sites

    def discover(self, roots: Sequence[str]) -> ScanSummary:
        """Scan roots and return the result with scan counters.

        Missing roots are skipped with a warning. Unreadable directories
        are skipped and never abort the scan.

        Args:
            roots: Directories to walk, in order.

        Returns:
            ScanSummary whose ``sites`` list is sorted and deduplicated.
        """
        summary = ScanSummary()
        candidates: set[str] = set()

        for raw_root in roots:
            root = os.path.abspath(raw_root)
            if not os.path.isdir(root):
                logger.warning("Scan root does not exist, skipping: %s", root)
                summary.roots_missing.append(root)
                continue

            logger.info("Scanning %s (max depth %d)", root, self._max_depth)
            summary.roots_scanned.append(root)
            candidates.update(self._walk(root, summary))

        sites: list[str] = []
        for candidate in candidates:
            if self._matcher.excludes_tree(candidate):
                logger.debug("Candidate under excluded path dropped: %s", candidate)
                continue
            if not is_valid_installation(candidate):
                logger.debug("Candidate failed marker validation: %s", candidate)
                summary.candidates_rejected += 1
                continue
            sites.append(candidate)

        summary.sites = sorted(sites)
        logger.info(
            "Scan completed: processed %d marker files, found %d sites",
            summary.markers_examined,
            len(summary.sites),
        )
        return summary

    def _walk(self, root: str, summary: ScanSummary) -> set[str]:
        """Walk one root depth-first and collect candidate roots.

        Args:
            root: Absolute, existing directory.
            summary: Counters updated in place.

        Returns:
            Candidate installation roots found below ``root``.
        """
        found: set[str] = set()
        stack: list[tuple[str, int]] = [(root, 0)]

        while stack:
            directory, depth = stack.pop()

            if self._matcher.matches(directory):
                logger.debug("Pruned excluded directory: %s", directory)
                summary.directories_pruned += 1
                continue

            try:
                with os.scandir(directory) as it:
                    entries = list(it)
            except PermissionError:
                logger.debug("Permission denied, skipping: %s", directory)
                summary.directories_unreadable += 1
                continue
            except OSError as e:
                logger.debug("Cannot read %s: %s", directory, e)
                summary.directories_unreadable += 1
                continue

            for entry in entries:
                try:
                    if entry.is_dir(follow_symlinks=False):
                        if depth + 1 < self._max_depth:
                            stack.append((entry.path, depth + 1))
                        continue
                    if not entry.is_file(follow_symlinks=False):
                        continue
                except OSError:
                    continue

                candidate = self._candidate_for(entry.name, entry.path, directory)
                if candidate is None:
                    continue

                summary.markers_examined += 1
                found.add(candidate)
                if summary.markers_examined % self._progress_interval == 0:
                    logger.info(
                        "Processed %d marker files, found %d candidate sites...",
                        summary.markers_examined,
                        len(found),
                    )

        return found

    def _candidate_for(self, name: str, path: str, directory: str) -> str | None:
        """Map a file to the installation root it points at, if any."""
        if name == PRIMARY_MARKER and DetectionStrategy.ROOT_MARKER in self._strategies:
            return directory

        if (
            name == THEME_MARKER_NAME
            and DetectionStrategy.THEME_MARKER in self._strategies
            and is_theme_marker(path)
        ):
            return root_from_theme_marker(path)

        return None
