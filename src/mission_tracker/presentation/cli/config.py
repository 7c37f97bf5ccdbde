"""CLI configuration helpers for options persistence."""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from mission_tracker.services.character_registry import DEFAULT_MAX_CHARACTERS

LOG_LEVEL_ENV = "MISSION_TRACKER_LOG_LEVEL"
_DEFAULT_LOG_LEVEL = "WARNING"
_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class TrackerConfig:
    catalog_dir: str | None = None
    max_characters: int = DEFAULT_MAX_CHARACTERS
    enforce_story_unlocks: bool = False
    log_level: str = _DEFAULT_LOG_LEVEL


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "MissionTracker"
        return Path.home() / "MissionTracker"
    return Path.home() / ".config" / "mission_tracker"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_storage_dir() -> Path:
    """Return the per-user directory backing the key/value store."""
    return get_user_data_dir() / "storage"


def _normalize_log_level(value: object) -> str:
    if isinstance(value, str) and value.upper() in _VALID_LOG_LEVELS:
        return value.upper()
    return _DEFAULT_LOG_LEVEL


def _normalize_max_characters(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return DEFAULT_MAX_CHARACTERS
    return max(1, value)


def _normalize(raw: Dict[str, Any]) -> TrackerConfig:
    catalog_dir = raw.get("catalog_dir")
    return TrackerConfig(
        catalog_dir=catalog_dir if isinstance(catalog_dir, str) and catalog_dir else None,
        max_characters=_normalize_max_characters(raw.get("max_characters")),
        enforce_story_unlocks=raw.get("enforce_story_unlocks") is True,
        log_level=_normalize_log_level(raw.get("log_level")),
    )


def load_config(path: Path | None = None) -> TrackerConfig:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return TrackerConfig()
    except (OSError, ValueError) as exc:
        logging.getLogger(__name__).warning("Ignoring unreadable config %s: %s", config_path, exc)
        return TrackerConfig()
    if not isinstance(raw, dict):
        return TrackerConfig()
    return _normalize(raw)


def save_config(config: TrackerConfig, path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    normalized = _normalize(
        {
            "catalog_dir": config.catalog_dir,
            "max_characters": config.max_characters,
            "enforce_story_unlocks": config.enforce_story_unlocks,
            "log_level": config.log_level,
        }
    )
    payload = {
        "catalog_dir": normalized.catalog_dir,
        "max_characters": normalized.max_characters,
        "enforce_story_unlocks": normalized.enforce_story_unlocks,
        "log_level": normalized.log_level,
    }
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def resolve_log_level(config: TrackerConfig) -> str:
    """Environment override first, then the configured level."""
    override = os.environ.get(LOG_LEVEL_ENV)
    if override:
        return _normalize_log_level(override)
    return config.log_level
