"""Base repository implementation for JSON catalog data."""
from __future__ import annotations

from pathlib import Path
from typing import Generic, List, TypeVar

from mission_tracker.data import paths
from mission_tracker.data.errors import CatalogMalformedError
from mission_tracker.data.json_loader import load_json

T = TypeVar("T")


class RepositoryBase(Generic[T]):
    """Common caching and loading behavior for single-file repositories."""

    def __init__(self, filename: str, base_path: Path | str | None = None) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._definition: T | None = None

    @property
    def filename(self) -> str:
        return self._filename

    def _get_file_path(self) -> Path:
        catalog_dir = paths.get_catalog_path(self._base_path)
        return catalog_dir / self._filename

    def _load_raw(self) -> dict[str, object]:
        file_path = self._get_file_path()
        raw = load_json(file_path)
        if not isinstance(raw, dict):
            raise self._malformed(f"Expected top-level object in {file_path}")
        return raw

    def _build(self, raw: dict[str, object]) -> T:
        """Convert a raw dict into a typed definition."""
        raise NotImplementedError

    def load(self) -> T:
        """Return the definition, parsing the file on first access."""
        if self._definition is None:
            raw = self._load_raw()
            self._definition = self._build(raw)
        return self._definition

    def _malformed(self, message: str) -> CatalogMalformedError:
        return CatalogMalformedError(message, filename=self._filename)

    def _require_mapping(self, value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise self._malformed(f"{context} must be an object.")
        return value

    def _require_list(self, value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise self._malformed(f"{context} must be a list.")
        return value

    def _optional_list(self, value: object, context: str) -> list[object]:
        if value is None:
            return []
        return self._require_list(value, context)

    def _require_str(self, value: object, context: str) -> str:
        if not isinstance(value, str):
            raise self._malformed(f"{context} must be a string.")
        return value

    def _require_int(self, value: object, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise self._malformed(f"{context} must be an integer.")
        return value

    @staticmethod
    def _optional_str(value: object) -> str | None:
        return value if isinstance(value, str) else None

    @staticmethod
    def _optional_int(value: object) -> int | None:
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value

    def _str_list(self, value: object, context: str) -> List[str]:
        result: List[str] = []
        for entry in self._optional_list(value, context):
            if not isinstance(entry, str):
                raise self._malformed(f"{context} entries must be strings.")
            result.append(entry)
        return result
