"""Serialization helpers for characters and export snapshots."""
from __future__ import annotations

import json
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Sequence, Set

from mission_tracker.domain.progress_state import Character, ProgressData
from mission_tracker.services.errors import SaveLoadError

CharacterPayload = Dict[str, Any]

# Numeric dates from older exports are seconds since this epoch.
_REFERENCE_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)


class SaveService:
    """Converts characters to/from validated JSON payloads."""

    SNAPSHOT_VERSION = "1.0"

    def serialize_character(self, character: Character) -> CharacterPayload:
        return {
            "id": character.id,
            "name": character.name,
            "server": character.server,
            "job": character.job,
            "createdDate": _format_date(character.created_date),
            "progress": self._serialize_progress(character.progress),
        }

    def serialize_characters(self, characters: Sequence[Character]) -> List[CharacterPayload]:
        return [self.serialize_character(character) for character in characters]

    def deserialize_character(self, payload: Any, context: str = "character") -> Character:
        if not isinstance(payload, Mapping):
            raise SaveLoadError(f"{context} must be an object.")
        character_id = self._require_str(payload.get("id"), f"{context}.id")
        if not character_id:
            raise SaveLoadError(f"{context}.id must not be empty.")
        progress_payload = payload.get("progress")
        if progress_payload is None:
            progress = ProgressData(
                completed_node_ids=self._coerce_id_set(
                    payload.get("completedNodeIds"), f"{context}.completedNodeIds"
                )
            )
        else:
            progress = self._deserialize_progress(progress_payload, f"{context}.progress")
        return Character(
            id=character_id,
            name=self._require_str(payload.get("name"), f"{context}.name"),
            server=self._require_str(payload.get("server"), f"{context}.server"),
            job=self._coerce_optional_str(payload.get("job"), f"{context}.job"),
            created_date=self._coerce_date(payload.get("createdDate"), f"{context}.createdDate"),
            progress=progress,
        )

    def deserialize_characters(self, payload: Any) -> List[Character]:
        if not isinstance(payload, list):
            raise SaveLoadError("Character data must be a list.")
        return [
            self.deserialize_character(entry, f"characters[{index}]") for index, entry in enumerate(payload)
        ]

    def export_snapshot(self, characters: Sequence[Character], *, exported_at: datetime | None = None) -> str:
        """Return a pretty-printed, versioned snapshot of the given characters."""
        snapshot = {
            "version": self.SNAPSHOT_VERSION,
            "exportDate": _format_date(exported_at or datetime.now(timezone.utc)),
            "characters": self.serialize_characters(characters),
        }
        return json.dumps(snapshot, indent=2, sort_keys=True)

    def import_snapshot(self, blob: str | bytes) -> List[Character]:
        try:
            snapshot = json.loads(blob)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise SaveLoadError(f"Snapshot is not valid JSON: {exc}") from exc
        if not isinstance(snapshot, Mapping):
            raise SaveLoadError("Snapshot must be a JSON object.")
        version = snapshot.get("version")
        if version != self.SNAPSHOT_VERSION:
            raise SaveLoadError(f"Unsupported snapshot version: {version!r}.")
        self._coerce_date(snapshot.get("exportDate"), "exportDate")
        return self.deserialize_characters(snapshot.get("characters"))

    def _serialize_progress(self, progress: ProgressData) -> Dict[str, Any]:
        return {
            "completedNodeIds": sorted(progress.completed_node_ids),
            "completedMissionIds": sorted(progress.completed_mission_ids),
            "completedQuestIds": sorted(progress.completed_quest_ids),
            "completedNMIds": sorted(progress.completed_nm_ids),
            "completedROEIds": sorted(progress.completed_roe_ids),
            "lastUpdated": _format_date(progress.last_updated),
            "totalPlaytimeSeconds": progress.total_playtime_seconds,
        }

    def _deserialize_progress(self, payload: Any, context: str) -> ProgressData:
        if not isinstance(payload, Mapping):
            raise SaveLoadError(f"{context} must be an object.")
        nm_ids = payload.get("completedNMIds", payload.get("completedUnityNMIds"))
        playtime = payload.get("totalPlaytimeSeconds", payload.get("totalPlaytime", 0))
        return ProgressData(
            completed_node_ids=self._coerce_id_set(payload.get("completedNodeIds"), f"{context}.completedNodeIds"),
            completed_mission_ids=self._coerce_id_set(
                payload.get("completedMissionIds"), f"{context}.completedMissionIds"
            ),
            completed_quest_ids=self._coerce_id_set(
                payload.get("completedQuestIds"), f"{context}.completedQuestIds"
            ),
            completed_nm_ids=self._coerce_id_set(nm_ids, f"{context}.completedNMIds"),
            completed_roe_ids=self._coerce_id_set(payload.get("completedROEIds"), f"{context}.completedROEIds"),
            last_updated=self._coerce_date(payload.get("lastUpdated"), f"{context}.lastUpdated"),
            total_playtime_seconds=self._coerce_playtime(playtime, f"{context}.totalPlaytimeSeconds"),
        )

    @staticmethod
    def _require_str(value: Any, context: str) -> str:
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string.")
        return value

    @staticmethod
    def _coerce_optional_str(value: Any, context: str) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string or null.")
        return value or None

    @staticmethod
    def _coerce_id_set(value: Any, context: str) -> Set[str]:
        if value is None:
            return set()
        if not isinstance(value, list):
            raise SaveLoadError(f"{context} must be a list.")
        result: Set[str] = set()
        for entry in value:
            if not isinstance(entry, str):
                raise SaveLoadError(f"{context} entries must be strings.")
            result.add(entry)
        return result

    @staticmethod
    def _coerce_playtime(value: Any, context: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SaveLoadError(f"{context} must be a non-negative number.")
        try:
            seconds = float(value)
        except OverflowError as exc:
            raise SaveLoadError(f"{context} is out of range.") from exc
        if not math.isfinite(seconds) or seconds < 0:
            raise SaveLoadError(f"{context} must be a non-negative number.")
        return seconds

    @staticmethod
    def _coerce_date(value: Any, context: str) -> datetime:
        if isinstance(value, bool):
            raise SaveLoadError(f"{context} must be an ISO-8601 string.")
        if isinstance(value, (int, float)):
            try:
                if not math.isfinite(value):
                    raise SaveLoadError(f"{context} must be a finite number of seconds.")
                return _REFERENCE_EPOCH + timedelta(seconds=value)
            except (OverflowError, ValueError) as exc:
                raise SaveLoadError(f"{context} is out of range.") from exc
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be an ISO-8601 string.")
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise SaveLoadError(f"{context} is not a valid date: {value!r}") from exc
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed


def _format_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
