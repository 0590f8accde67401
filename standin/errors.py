"""Error types raised by the test-double builders and queries."""

from __future__ import annotations


class StandInError(RuntimeError):
    """Base class for errors raised by :mod:`standin`."""


class DescriptorError(StandInError, ValueError):
    """Raised when an interface descriptor is malformed."""


class UnknownMethodError(StandInError, AttributeError):
    """Raised when a method identifier is not declared by the interface."""


class NotASpyError(StandInError, TypeError):
    """Raised when a call query targets an object that records no calls."""


class ConfigError(StandInError, ValueError):
    """Raised when a configuration value cannot be interpreted."""
