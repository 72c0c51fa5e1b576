"""Data models for wpfleet.

This module exports the site, operation and run statistics models.
"""

from wpfleet.models.operation import (
    MODE_OPERATIONS,
    Mode,
    Operation,
    OperationResult,
    Outcome,
    classify_exit,
    operations_for,
)
from wpfleet.models.site import FIELD_DELIMITER, SiteEntry
from wpfleet.models.stats import RunStats, SiteTiming, SkippedSite

__all__ = [
    "FIELD_DELIMITER",
    "MODE_OPERATIONS",
    "Mode",
    "Operation",
    "OperationResult",
    "Outcome",
    "RunStats",
    "SiteEntry",
    "SiteTiming",
    "SkippedSite",
    "classify_exit",
    "operations_for",
]
