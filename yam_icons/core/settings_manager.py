"""Settings manager with seeded defaults and JSON import/export support."""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


DEFAULT_SETTINGS: Dict[str, Any] = {
    # Icons -----------------------------------------------------------------------
    "icons/png_dpi": _env_int("YAM_ICONS_PNG_DPI", 72),
    "icons/resample": "LANCZOS",
    # Logging ---------------------------------------------------------------------
    "logging/level": "INFO",
    "logging/console": True,
    "logging/diagnostics": False,
}


class SettingsManager:
    """Key/value settings store supporting JSON serialisation."""

    def __init__(
        self,
        *,
        seed_defaults: bool = True,
        defaults: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._store: Dict[str, Any] = {}
        self._defaults: Dict[str, Any] = dict(DEFAULT_SETTINGS if defaults is None else defaults)
        if seed_defaults:
            self._store.update(self._defaults)

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._store.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._store[key] = value

    def remove(self, key: str) -> None:
        self._store.pop(key, None)

    def clear(self) -> None:
        self._store.clear()

    def reset_to_defaults(self) -> None:
        """Drop all values and re-apply the seeded defaults."""

        self._store.clear()
        self._store.update(self._defaults)

    def contains(self, key: str) -> bool:
        return key in self._store

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key in self._all_keys():
            result[key] = self._store[key]
        return result

    def from_dict(self, values: Mapping[str, Any], *, clear: bool = False) -> None:
        if clear:
            self.clear()
        for key, value in values.items():
            self._store[key] = value

    def export_json(self, path: Path) -> None:
        path = Path(path)
        data = self.to_dict()
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2, sort_keys=True)

    def import_json(self, path: Path, *, clear: bool = False) -> None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(path)
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError("Settings JSON must describe an object")
        self.from_dict(data, clear=clear)

    def _all_keys(self) -> List[str]:
        return sorted(self._store.keys())
