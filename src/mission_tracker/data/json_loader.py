"""Low-level JSON helpers for repositories."""
from __future__ import annotations

import json
from pathlib import Path

from .errors import CatalogMalformedError, CatalogNotFoundError


def load_json(path: Path) -> object:
    """Load JSON from disk and raise a CatalogLoadError subclass on failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise CatalogNotFoundError(f"Catalog file not found: {path}", filename=path.name) from exc
    except OSError as exc:
        raise CatalogNotFoundError(f"Unable to read catalog file: {path}", filename=path.name) from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise CatalogMalformedError(f"Invalid JSON in {path}: {exc}", filename=path.name) from exc
