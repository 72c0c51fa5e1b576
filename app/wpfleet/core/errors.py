"""Exception hierarchy for wpfleet.

Only environment, registry and configuration errors abort a command.
Everything that goes wrong for a single site or a single operation is
recorded against that site or operation and the run carries on.
"""


class WpFleetError(Exception):
    """Base exception for all wpfleet errors."""


class EnvironmentCheckError(WpFleetError):
    """Raised when the host cannot run maintenance at all.

    Missing WP-CLI executable or insufficient privilege to switch
    identities.
    """


class LockHeldError(EnvironmentCheckError):
    """Raised when another wpfleet run holds or is racing for the host."""


class RegistryError(WpFleetError):
    """Base exception for site registry errors."""


class RegistryNotFoundError(RegistryError):
    """Raised when the site registry file does not exist."""


class ConfigError(WpFleetError):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file cannot be parsed."""


class IdentityResolutionError(WpFleetError):
    """Raised when no strategy yields a usable account for a site.

    Attributes:
        path: Installation root that could not be resolved.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot resolve identity for {path}: {reason}")
        self.path = path
        self.reason = reason
