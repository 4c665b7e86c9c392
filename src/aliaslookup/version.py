# src/aliaslookup/version.py — v1
"""Package version."""

__version__ = "0.3.0"
