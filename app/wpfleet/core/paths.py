"""XDG-compliant path management for wpfleet.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and state storage.

XDG defaults:
- Config: ~/.config/wpfleet/
- State: ~/.local/state/wpfleet/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "wpfleet"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/wpfleet/ (or XDG_CONFIG_HOME/wpfleet/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes the run log and the run lock.

    Returns:
        Path to ~/.local/state/wpfleet/ (or XDG_STATE_HOME/wpfleet/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/wpfleet/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_registry_path() -> Path:
    """Get the default site registry path.

    Returns:
        Path to ~/.config/wpfleet/sites.txt.
    """
    return get_config_dir() / "sites.txt"


def get_log_path() -> Path:
    """Get the durable run log path.

    Returns:
        Path to ~/.local/state/wpfleet/wpfleet.log.
    """
    return get_state_dir() / "wpfleet.log"


def get_lock_path() -> Path:
    """Get the run lock file path.

    Returns:
        Path to ~/.local/state/wpfleet/wpfleet.lock.
    """
    return get_state_dir() / "wpfleet.lock"
