"""Custom exception hierarchy for gridcutter."""

from __future__ import annotations


class GridCutterError(Exception):
    """Base class for all custom errors raised by gridcutter."""


# --- 2-layer hierarchy ---

class DomainError(GridCutterError):
    """Base class for layout-model errors."""


class InfrastructureError(GridCutterError):
    """Base class for errors raised while talking to files or codecs."""


# --- Domain errors ---

class CellIndexError(DomainError):
    """Raised when a cell index is negative, not an integer or out of range."""


class InvalidExtentError(DomainError):
    """Raised when an image extent has a non-positive width or height."""


# --- Infrastructure errors ---

class ImageProbeError(InfrastructureError):
    """Raised when an image file cannot be opened to read its size."""


# --- Settings errors ---

class SettingsError(GridCutterError):
    """Base class for settings related failures."""


class SettingsLoadError(SettingsError):
    """Raised when the settings file exists but cannot be read."""


class SettingsValidationError(SettingsError):
    """Raised when a settings value fails schema validation."""


__all__ = [
    "CellIndexError",
    "DomainError",
    "GridCutterError",
    "ImageProbeError",
    "InfrastructureError",
    "InvalidExtentError",
    "SettingsError",
    "SettingsLoadError",
    "SettingsValidationError",
]
