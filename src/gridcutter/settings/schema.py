"""Schema helpers for the gridcutter settings file."""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import DEFAULT_CELL_SIZE, MAX_GRID_DIMENSION, MIN_CELL_SIZE

_LOGGER = logging.getLogger(__name__)

SCHEMA_TAG = "gridcutter/settings@1"

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "gridcutter/settings.schema.json",
    "type": "object",
    "required": [
        "schema",
        "mode",
        "rows",
        "cols",
        "grid_color",
        "line_width",
        "cell_width",
        "cell_height",
    ],
    "properties": {
        "schema": {"const": SCHEMA_TAG},
        "mode": {"type": "string", "enum": ["uniform", "centerline"]},
        "rows": {"type": "integer", "minimum": 1, "maximum": MAX_GRID_DIMENSION},
        "cols": {"type": "integer", "minimum": 1, "maximum": MAX_GRID_DIMENSION},
        "grid_color": {"type": "string", "pattern": "^#[0-9a-fA-F]{6}$"},
        "line_width": {"type": "integer", "minimum": 1, "maximum": 10},
        "cell_width": {"type": "integer", "minimum": MIN_CELL_SIZE},
        "cell_height": {"type": "integer", "minimum": MIN_CELL_SIZE},
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": SCHEMA_TAG,
    "mode": "uniform",
    "rows": 6,
    "cols": 4,
    "grid_color": "#ff0000",
    "line_width": 2,
    "cell_width": DEFAULT_CELL_SIZE,
    "cell_height": DEFAULT_CELL_SIZE,
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS`, resetting invalid entries.

    Any top-level key that fails validation falls back to its default
    individually, so one bad value never discards the rest of the file.
    """

    merged = deepcopy(DEFAULT_SETTINGS)
    if isinstance(data, dict):
        merged.update(data)
    elif data is not None:
        _LOGGER.warning("Ignoring settings payload of type %s", type(data).__name__)

    for error in list(_validator.iter_errors(merged)):
        key = error.path[0] if error.path else None
        if key in DEFAULT_SETTINGS:
            _LOGGER.warning(
                "Invalid setting %s=%r (%s), using default %r",
                key,
                merged.get(key),
                error.message,
                DEFAULT_SETTINGS[key],
            )
            merged[key] = deepcopy(DEFAULT_SETTINGS[key])
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = [
    "DEFAULT_SETTINGS",
    "SCHEMA_TAG",
    "SETTINGS_SCHEMA",
    "merge_with_defaults",
    "validate_settings",
]
