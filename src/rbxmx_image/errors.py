"""Exceptions raised by the rbxmx image converter."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for every conversion failure."""


class UsageError(ConversionError):
    """Raised for missing or invalid command line arguments."""


class DecodeError(ConversionError):
    """Raised when the source image cannot be read or decoded."""


class TemplateMissingError(ConversionError):
    """Raised when the container template cannot be opened."""


class OutputOpenError(ConversionError):
    """Raised when the destination file cannot be opened for writing."""


class CapacityExceededError(ConversionError):
    """Raised when a value does not fit in its fixed-width field."""


class FormatError(ConversionError):
    """Raised when encoded data is truncated or inconsistent."""
