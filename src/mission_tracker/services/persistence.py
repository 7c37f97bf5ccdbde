"""Persistence port for the character registry and its key/value adapter."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Protocol, Sequence

from mission_tracker.domain.progress_state import Character
from mission_tracker.services.errors import CorruptDataError, PersistenceIOError
from mission_tracker.services.save_service import SaveService

logger = logging.getLogger(__name__)

CHARACTERS_KEY = "characters"
ACTIVE_CHARACTER_ID_KEY = "activeCharacterId"
LEGACY_COMPLETED_NODES_KEY = "completedNodeIds"

LEGACY_CHARACTER_NAME = "Character 1"
LEGACY_CHARACTER_SERVER = "Unknown"


class KeyValueStore(Protocol):
    """Minimal key/value storage holding JSON-compatible values."""

    def get(self, key: str) -> Any | None:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


@dataclass(slots=True)
class PersistedState:
    characters: List[Character]
    active_id: str | None


class PersistencePort(Protocol):
    def load(self) -> PersistedState | None:
        ...

    def save(self, characters: Sequence[Character], active_id: str | None) -> None:
        ...

    def export_snapshot(self, characters: Sequence[Character]) -> str:
        ...

    def import_snapshot(self, blob: str | bytes) -> List[Character]:
        ...

    def migrate_legacy(self) -> bool:
        ...


class KeyValuePersistence:
    """Stores the character array and active id under two keys of one store."""

    def __init__(self, store: KeyValueStore, save_service: SaveService | None = None) -> None:
        self._store = store
        self._save_service = save_service or SaveService()

    def load(self) -> PersistedState | None:
        """Return persisted state, or None when nothing has been saved yet."""
        raw_characters = self._read(CHARACTERS_KEY)
        if raw_characters is None:
            return None
        characters = self._save_service.deserialize_characters(raw_characters)
        active_id = self._read(ACTIVE_CHARACTER_ID_KEY)
        if active_id is not None and not isinstance(active_id, str):
            logger.warning("Ignoring non-string active character id: %r", active_id)
            active_id = None
        return PersistedState(characters=characters, active_id=active_id)

    def save(self, characters: Sequence[Character], active_id: str | None) -> None:
        """Write the active id, then the character array.

        If the array write fails the old array stays next to the new id;
        ``CharacterRegistry.restore`` falls back to the first character when
        that id is not in the array.
        """
        payload = self._save_service.serialize_characters(characters)
        try:
            if active_id is not None:
                self._store.set(ACTIVE_CHARACTER_ID_KEY, active_id)
            else:
                self._store.delete(ACTIVE_CHARACTER_ID_KEY)
            self._store.set(CHARACTERS_KEY, payload)
        except OSError as exc:
            raise PersistenceIOError(f"Unable to save characters: {exc}") from exc

    def export_snapshot(self, characters: Sequence[Character]) -> str:
        return self._save_service.export_snapshot(characters)

    def import_snapshot(self, blob: str | bytes) -> List[Character]:
        return self._save_service.import_snapshot(blob)

    def migrate_legacy(self) -> bool:
        """Move single-character progress into the multi-character layout.

        Runs only when no character array exists and the legacy node list does.
        Safe to call on every startup; returns True when a migration happened.
        """
        if self._read(CHARACTERS_KEY) is not None:
            return False
        legacy = self._read(LEGACY_COMPLETED_NODES_KEY)
        if legacy is None:
            return False
        if not isinstance(legacy, list) or not all(isinstance(entry, str) for entry in legacy):
            raise CorruptDataError("Legacy completed node list must be a list of strings.")
        character = Character(name=LEGACY_CHARACTER_NAME, server=LEGACY_CHARACTER_SERVER)
        character.progress.completed_node_ids = set(legacy)
        self.save([character], character.id)
        try:
            self._store.delete(LEGACY_COMPLETED_NODES_KEY)
        except OSError as exc:
            raise PersistenceIOError(f"Unable to remove legacy progress: {exc}") from exc
        logger.info("Migrated legacy progress into '%s' with %d completed nodes", character.name, len(legacy))
        return True

    def _read(self, key: str) -> Any | None:
        try:
            return self._store.get(key)
        except OSError as exc:
            raise PersistenceIOError(f"Unable to read '{key}': {exc}") from exc
        except ValueError as exc:
            raise CorruptDataError(f"Stored value for '{key}' is corrupt: {exc}") from exc
