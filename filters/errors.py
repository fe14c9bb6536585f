from __future__ import annotations


class FilterError(Exception):
    """Base class for frame filter errors."""


class InitializationError(FilterError):
    """One-time filter setup could not complete; the filter must not be loaded."""


class EncodingError(FilterError):
    """A frame snapshot could not be encoded or written."""
