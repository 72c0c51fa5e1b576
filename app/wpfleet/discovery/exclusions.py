"""Exclusion rules for installation discovery.

A rule is either an absolute directory, which removes that directory and
everything below it, or a glob pattern matched against the full path.
Rules are checked before the scanner descends into a directory.
"""

import fnmatch
import os
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

_GLOB_CHARS = frozenset("*?[")


class RuleKind(str, Enum):
    """Kind of exclusion rule."""

    PATH = "path"
    GLOB = "glob"


@dataclass(frozen=True, slots=True)
class ExclusionRule:
    """A single exclusion rule.

    Attributes:
        pattern: Absolute directory or shell-style glob.
        kind: How the pattern is matched.
    """

    pattern: str
    kind: RuleKind

    def __post_init__(self) -> None:
        """Validate rule data after initialization."""
        if not self.pattern:
            msg = "Exclusion pattern cannot be empty"
            raise ValueError(msg)
        if self.kind == RuleKind.PATH and not os.path.isabs(self.pattern):
            msg = f"Exclusion path must be absolute or a glob pattern: {self.pattern}"
            raise ValueError(msg)

    @classmethod
    def parse(cls, pattern: str) -> "ExclusionRule":
        """Classify a raw pattern string.

        Anything containing ``*``, ``?`` or ``[`` is a glob; everything
        else must be an absolute directory.

        Args:
            pattern: Raw pattern from the CLI or config file.

        Returns:
            ExclusionRule of the detected kind.

        Raises:
            ValueError: If a non-glob pattern is not absolute.
        """
        pattern = pattern.strip()
        if _GLOB_CHARS.intersection(pattern):
            return cls(pattern=pattern, kind=RuleKind.GLOB)
        # Trailing separators would defeat the prefix comparison
        normalized = pattern.rstrip("/") or "/"
        return cls(pattern=normalized, kind=RuleKind.PATH)


class ExclusionMatcher:
    """Decides whether a filesystem path is excluded.

    Path rules only take effect while the directory they name exists, so
    a dangling rule costs nothing. Glob rules are case-sensitive.

    Example:
        >>> matcher = ExclusionMatcher.from_patterns(["*/backups*"])
        >>> matcher.matches("/var/www/x/backups/site")
        True
    """

    def __init__(self, rules: Iterable[ExclusionRule] = ()) -> None:
        self._rules = tuple(rules)

    @classmethod
    def from_patterns(cls, patterns: Iterable[str]) -> "ExclusionMatcher":
        """Build a matcher from raw pattern strings, skipping blanks."""
        return cls(ExclusionRule.parse(p) for p in patterns if p.strip())

    @property
    def rules(self) -> tuple[ExclusionRule, ...]:
        """Configured rules in evaluation order."""
        return self._rules

    def matches(self, path: str) -> bool:
        """Check whether a path is excluded by any rule.

        Args:
            path: Absolute filesystem path.

        Returns:
            True if the path is on or under an existing excluded directory,
            or if it matches a glob rule.
        """
        for rule in self._rules:
            if rule.kind == RuleKind.GLOB:
                if fnmatch.fnmatchcase(path, rule.pattern):
                    return True
                continue

            if not os.path.isdir(rule.pattern):
                continue
            if path == rule.pattern or path.startswith(rule.pattern.rstrip("/") + "/"):
                return True

        return False

    def excludes_tree(self, path: str) -> bool:
        """Check a path together with all of its ancestors.

        Used on candidate roots after discovery, where the directory walk
        might not have visited every ancestor (e.g. a root given below an
        excluded directory).

        Args:
            path: Absolute filesystem path.

        Returns:
            True if the path or any ancestor is excluded.
        """
        current = path
        while True:
            if self.matches(current):
                return True
            parent = os.path.dirname(current)
            if parent == current:
                return False
            current = parent

    def __bool__(self) -> bool:
        return bool(self._rules)
