"""Site registry persistence.

The registry is a plain UTF-8 text file with one installation per line::

    # comment
    /var/www/md/data/www/iya.ru
    /var/www/md/data/www/paulman.ru/news | md | news.paulman.ru

Fields are separated by ``|`` and trimmed: path, optional account and
optional domain. The file is meant to be edited by hand between runs,
so malformed lines are reported and skipped rather than rejected.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path
from tempfile import NamedTemporaryFile

from wpfleet import __version__
from wpfleet.core.errors import RegistryError, RegistryNotFoundError
from wpfleet.core.paths import get_registry_path
from wpfleet.models.site import FIELD_DELIMITER, SiteEntry

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"
MAX_FIELDS = 3


def parse_line(line: str) -> SiteEntry | None:
    """Parse a single registry line.

    Args:
        line: Raw line without its newline.

    Returns:
        SiteEntry, or None for blank and comment lines.

    Raises:
        ValueError: If the line has too many fields or an invalid path.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_MARKER):
        return None

    fields = [f.strip() for f in stripped.split(FIELD_DELIMITER)]
    if len(fields) > MAX_FIELDS:
        msg = f"expected at most {MAX_FIELDS} fields, got {len(fields)}"
        raise ValueError(msg)

    path = fields[0].rstrip("/") or fields[0]
    user = fields[1] if len(fields) > 1 and fields[1] else None
    domain = fields[2] if len(fields) > 2 and fields[2] else None
    return SiteEntry(path=path, user=user, domain=domain)


class SiteRegistry:
    """Loads and saves the ordered list of managed installations.

    Storage location: ~/.config/wpfleet/sites.txt unless overridden.

    Attributes:
        path: Registry file.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path if path is not None else get_registry_path()

    @property
    def path(self) -> Path:
        """Registry file location."""
        return self._path

    def exists(self) -> bool:
        """Check if the registry file exists."""
        return self._path.is_file()

    def load(self) -> list[SiteEntry]:
        """Read registry entries in file order.

        Blank lines and comments are ignored. Malformed lines and repeated
        paths are skipped with a warning.

        Returns:
            Entries in the order they appear in the file.

        Raises:
            RegistryNotFoundError: If the registry file does not exist.
            RegistryError: If the file cannot be read or decoded.
        """
        if not self._path.exists():
            raise RegistryNotFoundError(f"Site registry not found: {self._path}")

        entries: list[SiteEntry] = []
        seen: set[str] = set()

        try:
            with self._path.open(encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    try:
                        entry = parse_line(line)
                    except ValueError as e:
                        logger.warning(
                            "Skipping malformed registry line %d: %s", line_num, str(e)
                        )
                        continue

                    if entry is None:
                        continue
                    if entry.path in seen:
                        logger.warning(
                            "Skipping duplicate registry line %d: %s", line_num, entry.path
                        )
                        continue

                    seen.add(entry.path)
                    entries.append(entry)
        except (OSError, UnicodeDecodeError) as e:
            raise RegistryError(f"Failed to read site registry {self._path}: {e}") from e

        return entries

    def save(self, entries: Iterable[SiteEntry]) -> Path:
        """Write entries to the registry file.

        The file is written atomically by first writing to a temporary file
        in the same directory and then using os.replace(). The temporary file
        is removed on any failure, including an interrupt.

        Args:
            entries: Entries to persist, in order.

        Returns:
            Path where the registry was saved.

        Raises:
            RegistryError: If the file cannot be written.
        """
        lines = [
            f"{COMMENT_MARKER} wpfleet site registry (wpfleet {__version__})",
            f"{COMMENT_MARKER} path [{FIELD_DELIMITER} user [{FIELD_DELIMITER} domain]]",
        ]
        lines.extend(entry.to_line() for entry in entries)

        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = Path(f.name)
                f.write("\n".join(lines) + "\n")
            os.replace(tmp_path, self._path)
            tmp_path = None
        except OSError as e:
            raise RegistryError(f"Failed to write site registry {self._path}: {e}") from e
        finally:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()

        return self._path


def merge_discovered(existing: Iterable[SiteEntry], discovered: Iterable[str]) -> list[SiteEntry]:
    """Build registry entries for discovered paths, keeping known overrides.

    Args:
        existing: Entries currently in the registry.
        discovered: Sorted installation roots from a scan.

    Returns:
        One entry per discovered path, carrying the user and domain of the
        existing entry with the same path. Entries that were not
        rediscovered are dropped.
    """
    by_path = {entry.path: entry for entry in existing}
    return [by_path.get(path, SiteEntry(path=path)) for path in discovered]
