"""Identity resolution for installations.

This module decides which system account runs maintenance for a site.
"""

from wpfleet.identity.accounts import AccountDirectory, SystemAccounts
from wpfleet.identity.credentials import extract_constant
from wpfleet.identity.resolver import IdentityResolver, IdentitySource, ResolvedIdentity

__all__ = [
    "AccountDirectory",
    "IdentityResolver",
    "IdentitySource",
    "ResolvedIdentity",
    "SystemAccounts",
    "extract_constant",
]
