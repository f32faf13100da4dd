"""Exception types raised by :mod:`daily_readings`."""

from __future__ import annotations


class ReadingsError(Exception):
    """Base class for errors raised by the readings pipeline."""


class ParseError(ReadingsError):
    """Raised when a readings page cannot be parsed as markup at all."""


class FetchError(ReadingsError):
    """Raised when the source page cannot be retrieved or parsed.

    The date stays uncached, so callers may simply try again.
    """


class ValidationError(ReadingsError, ValueError):
    """Raised when a progress update request is malformed."""


__all__ = ["ReadingsError", "ParseError", "FetchError", "ValidationError"]
