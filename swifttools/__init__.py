"""Command-line utilities for field extraction, file finding and disk usage, and an awk value type."""

__version__ = "0.1.0"