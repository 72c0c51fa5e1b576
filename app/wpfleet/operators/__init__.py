"""Identity runners and the WP-CLI command builder.

This module provides the abstract IdentityRunner, the su-based
implementation and the WpCli wrapper used by the orchestrator.
"""

from wpfleet.operators.base import ExecutionResult, IdentityRunner
from wpfleet.operators.su import SuRunner
from wpfleet.operators.wpcli import WpCli

__all__ = ["ExecutionResult", "IdentityRunner", "SuRunner", "WpCli"]
