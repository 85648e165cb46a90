"""Settings file management with validation and change notifications."""

from __future__ import annotations

import json
import logging
import os
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any

from jsonschema import ValidationError
from PySide6.QtCore import QObject, Signal

from ..errors import SettingsLoadError, SettingsValidationError
from ..utils.jsonio import read_json, write_json
from .schema import DEFAULT_SETTINGS, merge_with_defaults, validate_settings

_LOGGER = logging.getLogger(__name__)


def default_settings_path() -> Path:
    """Return the default settings.json location for the current platform."""

    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "gridcutter" / "settings.json"
        return Path.home() / "AppData" / "Roaming" / "gridcutter" / "settings.json"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "gridcutter" / "settings.json"
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "gridcutter" / "settings.json"
    return Path.home() / ".config" / "gridcutter" / "settings.json"


class SettingsManager(QObject):
    """Load, validate and persist the grid settings between sessions."""

    settingsChanged = Signal(str, object)

    def __init__(self, path: Path | None = None) -> None:
        super().__init__()
        self._path = path
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)

    @property
    def path(self) -> Path:
        return self._path or default_settings_path()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Load the settings JSON from disk, creating defaults if missing.

        A file that is not valid JSON is replaced by the defaults; a file that
        cannot be read at all raises :class:`SettingsLoadError`.
        """

        path = self.path
        self._path = path
        payload: Any = None
        if path.exists():
            try:
                payload = read_json(path)
            except json.JSONDecodeError as exc:
                _LOGGER.warning("Settings file %s is not valid JSON (%s); using defaults", path, exc)
            except OSError as exc:
                raise SettingsLoadError(f"Unable to read {path}: {exc}") from exc
        self._data = merge_with_defaults(payload)
        self._write()

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value stored for *key*."""

        return self._data.get(key, default)

    def as_dict(self) -> dict[str, Any]:
        return deepcopy(self._data)

    def set(self, key: str, value: Any) -> None:
        """Update *key* with *value* and persist the change.

        Raises
        ------
        SettingsValidationError
            If the key is unknown or the value does not satisfy the schema.
        """

        if key not in DEFAULT_SETTINGS or key == "schema":
            raise SettingsValidationError(f"Unknown setting {key!r}")
        if self._data.get(key) == value and type(self._data.get(key)) is type(value):
            return
        candidate = dict(self._data)
        candidate[key] = value
        try:
            validate_settings(candidate)
        except ValidationError as exc:
            raise SettingsValidationError(f"Invalid value for {key}: {exc.message}") from exc
        self._data = candidate
        self._write()
        _LOGGER.debug("Setting %s changed to %r", key, value)
        self.settingsChanged.emit(key, value)

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _write(self) -> None:
        path = self.path
        self._path = path
        path.parent.mkdir(parents=True, exist_ok=True)
        write_json(path, self._data)


__all__ = ["SettingsManager", "default_settings_path"]
