"""
transact.version — package version string.

Usage:
    from transact.version import __version__
"""

# Bump this when making a tagged release. Use semver (major.minor.patch).
__version__ = "0.1.0"

__all__ = ["__version__"]
