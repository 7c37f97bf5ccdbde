"""Helpers for resolving catalog file locations."""
from __future__ import annotations

import os
from pathlib import Path

CATALOG_DIR_ENV = "MISSION_TRACKER_CATALOG_DIR"


def get_repo_root() -> Path:
    """Return the repository root."""
    return Path(__file__).resolve().parents[3]


def get_catalog_path(base_path: Path | str | None = None) -> Path:
    """Return the directory containing the bundled JSON catalogs."""
    if base_path is not None:
        return Path(base_path)
    override = os.environ.get(CATALOG_DIR_ENV)
    if override:
        return Path(override)
    return get_repo_root() / "data" / "catalog"
