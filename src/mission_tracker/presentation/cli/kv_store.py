"""File-system key/value store backing character persistence."""
from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any

from mission_tracker.presentation.cli import config

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFileKeyValueStore:
    """Stores each key as one JSON file inside a namespace directory."""

    def __init__(self, base_dir: Path | str | None = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else config.get_storage_dir()

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def get(self, key: str) -> Any | None:
        """Return the stored value, None when absent; raise ValueError on corrupt JSON."""
        path = self._key_path(key)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return json.loads(text)

    def set(self, key: str, value: Any) -> None:
        """Write the value through a temp file, then swap it into place."""
        path = self._key_path(key)
        self._base_dir.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(value, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(tmp_path, path)

    def delete(self, key: str) -> None:
        path = self._key_path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return

    def _key_path(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self._base_dir / f"{key}.json"
