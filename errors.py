"""
ProfileKit - Exception types.
"""

from __future__ import annotations


class ProfileKitError(Exception):
    """Base class for ProfileKit errors."""


class ConfigurationError(ProfileKitError):
    """A fatal configuration problem: unusable output folder or targets file."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path
