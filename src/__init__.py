# src/__init__.py — v1
"""ghcard: GitHub profile data acquisition and caching layer."""

from ghcard.version import __version__

__all__ = ["__version__"]
