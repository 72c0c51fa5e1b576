"""wpfleet - WordPress fleet discovery and maintenance."""

__version__ = "0.3.0"
