"""WordPress installation discovery.

This module provides the filesystem scanner, exclusion rules, marker
validation and metadata enrichment for discovered installations.
"""

from wpfleet.discovery.exclusions import ExclusionMatcher, ExclusionRule, RuleKind
from wpfleet.discovery.metadata import enrich, enrich_all
from wpfleet.discovery.models import UNKNOWN, DetectionStrategy, ScanSummary, SiteMetadata
from wpfleet.discovery.scanner import InstallationScanner

__all__ = [
    "UNKNOWN",
    "DetectionStrategy",
    "ExclusionMatcher",
    "ExclusionRule",
    "InstallationScanner",
    "RuleKind",
    "ScanSummary",
    "SiteMetadata",
    "enrich",
    "enrich_all",
]
