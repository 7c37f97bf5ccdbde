"""Service layer exports."""

from .character_registry import DEFAULT_MAX_CHARACTERS, CharacterRegistry, ImportSummary
from .errors import (
    CharacterLimitReachedError,
    CharacterNotFoundError,
    CorruptDataError,
    InvalidCharacterInputError,
    NoActiveCharacterError,
    PersistenceError,
    PersistenceIOError,
    RegistryError,
    SaveLoadError,
)
from .persistence import KeyValuePersistence, KeyValueStore, PersistedState, PersistencePort
from .progress_service import CategoryStats, MissionProgressView, ProgressService, ProgressUpdate
from .save_service import SaveService
from .unlock_rules import UnlockRuleTable

__all__ = [
    "DEFAULT_MAX_CHARACTERS",
    "CategoryStats",
    "CharacterLimitReachedError",
    "CharacterNotFoundError",
    "CharacterRegistry",
    "CorruptDataError",
    "ImportSummary",
    "InvalidCharacterInputError",
    "KeyValuePersistence",
    "KeyValueStore",
    "MissionProgressView",
    "NoActiveCharacterError",
    "PersistedState",
    "PersistenceError",
    "PersistenceIOError",
    "PersistencePort",
    "ProgressService",
    "ProgressUpdate",
    "RegistryError",
    "SaveLoadError",
    "SaveService",
    "UnlockRuleTable",
]
