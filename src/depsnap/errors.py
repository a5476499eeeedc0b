"""Exceptions raised while extracting a build model."""

from __future__ import annotations


class DepsnapError(Exception):
    """Base class for all depsnap failures."""


class ConfigError(DepsnapError, ValueError):
    """A configuration switch has a malformed value."""


class ConfigurationResolutionError(DepsnapError):
    """A dependency configuration could not be resolved."""

    def __init__(self, configuration: str, reason: str):
        super().__init__(f"Could not resolve configuration '{configuration}': {reason}")
        self.configuration = configuration
        self.reason = reason


class NativeVersionNotFoundError(DepsnapError, RuntimeError):
    """The distribution has no recognisable native-platform library."""


class SnapshotError(DepsnapError, ValueError):
    """A snapshot document is malformed."""
