"""Fleet configuration and settings.

This module provides the configuration model and I/O functions for
wpfleet. Configuration is stored in ~/.config/wpfleet/config.toml and
every field has a default, so a missing file is not an error.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wpfleet.core.errors import ConfigError, ConfigParseError
from wpfleet.core.paths import get_config_path, get_lock_path, get_log_path, get_registry_path

DEFAULT_ROOTS: tuple[str, ...] = ("/var/www",)


class FleetConfig(BaseModel):
    """Configuration for discovery and maintenance runs.

    Attributes:
        roots: Directories searched by ``wpfleet discover`` when none are given.
        max_depth: Deepest directory level examined below each root.
        exclude: Exclusion rules (absolute directories or glob patterns).
        registry_path: Site registry file. None uses the XDG default.
        wp_cli: WP-CLI executable name or path.
        warning_exit_codes: WP-CLI exit codes treated as recoverable warnings.
        grace_seconds: Age under which a concurrent instance is tolerated.
        identity_segment_index: Path segment tried as the site's account name.
        credential_constant: wp-config.php constant holding an account name.
        lock_path: Run lock file. None uses the XDG default.
        log_file: Durable run log. None uses the XDG default.
    """

    model_config = ConfigDict(extra="forbid")

    roots: list[str] = Field(default_factory=lambda: list(DEFAULT_ROOTS))
    max_depth: Annotated[int, Field(ge=1, le=64)] = 8
    exclude: list[str] = Field(default_factory=list)
    registry_path: Path | None = None
    wp_cli: str = "wp"
    warning_exit_codes: list[int] = Field(default_factory=lambda: [2])
    grace_seconds: Annotated[int, Field(ge=0)] = 30
    identity_segment_index: Annotated[int, Field(ge=1)] = 3
    credential_constant: str = "DB_USER"
    lock_path: Path | None = None
    log_file: Path | None = None

    @field_validator("warning_exit_codes")
    @classmethod
    def validate_warning_codes(cls, v: list[int]) -> list[int]:
        """Reject 0, which always means success."""
        if any(code <= 0 for code in v):
            msg = "warning_exit_codes must be positive exit codes"
            raise ValueError(msg)
        return v

    @property
    def effective_registry_path(self) -> Path:
        """Registry path, falling back to the XDG default."""
        return self.registry_path or get_registry_path()

    @property
    def effective_lock_path(self) -> Path:
        """Lock path, falling back to the XDG default."""
        return self.lock_path or get_lock_path()

    @property
    def effective_log_file(self) -> Path:
        """Log path, falling back to the XDG default."""
        return self.log_file or get_log_path()


def load_config(path: Path | None = None) -> FleetConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated FleetConfig. Defaults when the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or the content is invalid.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return FleetConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return FleetConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: FleetConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The FleetConfig to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # TOML has no null; unset optional paths are simply omitted
    data = config.model_dump(mode="json", exclude_none=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path
