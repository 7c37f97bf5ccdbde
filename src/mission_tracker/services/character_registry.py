"""Ordered, bounded collection of characters with an active pointer."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from mission_tracker.domain.progress_state import Character
from mission_tracker.services.errors import (
    CharacterLimitReachedError,
    CharacterNotFoundError,
    InvalidCharacterInputError,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_CHARACTERS = 18


@dataclass(slots=True)
class ImportSummary:
    added: int = 0
    updated: int = 0
    skipped: int = 0

    @property
    def message(self) -> str:
        if self.added and self.updated:
            return (
                f"Imported {self.added} new character(s) and updated {self.updated} existing character(s)."
            )
        if self.added:
            return f"Imported {self.added} character(s) successfully."
        if self.updated:
            return f"Updated {self.updated} character(s) successfully."
        return "No characters were imported. You may have reached the character limit."


class CharacterRegistry:
    """Owns every Character record and which one is active.

    Characters are identified by id only; two records with the same name are
    different characters.
    """

    def __init__(self, max_characters: int = DEFAULT_MAX_CHARACTERS) -> None:
        if max_characters < 1:
            raise ValueError("max_characters must be at least 1.")
        self._max_characters = max_characters
        self._characters: List[Character] = []
        self._active_id: str | None = None

    @property
    def character_limit(self) -> int:
        return self._max_characters

    @property
    def can_add(self) -> bool:
        return len(self._characters) < self._max_characters

    @property
    def active_id(self) -> str | None:
        return self._active_id

    @property
    def active(self) -> Character | None:
        if self._active_id is None:
            return None
        return self._find(self._active_id)

    def __len__(self) -> int:
        return len(self._characters)

    def all(self) -> list[Character]:
        return list(self._characters)

    def get(self, character_id: str) -> Character:
        character = self._find(character_id)
        if character is None:
            raise CharacterNotFoundError(f"No character with id '{character_id}'.")
        return character

    def add(self, name: str, server: str, job: str | None = None) -> Character:
        if not self.can_add:
            raise CharacterLimitReachedError(
                f"Character limit of {self._max_characters} reached."
            )
        name = name.strip()
        server = server.strip()
        if not name or not server:
            raise InvalidCharacterInputError("Character name and server must not be empty.")
        job = job.strip() if job else None
        character = Character(name=name, server=server, job=job or None)
        self._characters.append(character)
        if self._active_id is None:
            self._active_id = character.id
        return character

    def set_active(self, character_id: str) -> Character:
        character = self.get(character_id)
        self._active_id = character.id
        return character

    def delete(self, character_id: str) -> None:
        self._characters = [character for character in self._characters if character.id != character_id]
        if self._active_id == character_id:
            self._active_id = self._characters[0].id if self._characters else None

    def update(self, character: Character) -> None:
        index = self._index_of(character.id)
        if index is None:
            raise CharacterNotFoundError(f"No character with id '{character.id}'.")
        self._characters[index] = character

    def import_merge(self, characters: Iterable[Character]) -> ImportSummary:
        """Merge by id: replace matches in place, append new ids while capacity remains."""
        summary = ImportSummary()
        for incoming in characters:
            index = self._index_of(incoming.id)
            if index is not None:
                self._characters[index] = incoming
                summary.updated += 1
            elif self.can_add:
                self._characters.append(incoming)
                summary.added += 1
            else:
                logger.info("Skipping import of character '%s': registry is full", incoming.id)
                summary.skipped += 1
        if self._active_id is None and self._characters:
            self._active_id = self._characters[0].id
        return summary

    def restore(self, characters: Sequence[Character], active_id: str | None) -> None:
        """Replace the registry contents with persisted state."""
        restored: List[Character] = []
        seen: set[str] = set()
        for character in characters:
            if character.id in seen:
                continue
            seen.add(character.id)
            restored.append(character)
        if len(restored) > self._max_characters:
            logger.warning(
                "Persisted state holds %d characters; keeping the first %d",
                len(restored),
                self._max_characters,
            )
            restored = restored[: self._max_characters]
        self._characters = restored
        if active_id is not None and self._find(active_id) is not None:
            self._active_id = active_id
        else:
            self._active_id = restored[0].id if restored else None

    def _find(self, character_id: str) -> Character | None:
        for character in self._characters:
            if character.id == character_id:
                return character
        return None

    def _index_of(self, character_id: str) -> int | None:
        for index, character in enumerate(self._characters):
            if character.id == character_id:
                return index
        return None
