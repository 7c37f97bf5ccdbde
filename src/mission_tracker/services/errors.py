"""Service-layer exceptions."""


class RegistryError(Exception):
    """Raised when a character registry operation cannot be applied."""


class CharacterLimitReachedError(RegistryError):
    """Raised when adding a character would exceed the registry capacity."""


class InvalidCharacterInputError(RegistryError):
    """Raised when a character name or server is empty."""


class CharacterNotFoundError(RegistryError):
    """Raised when no character has the requested id."""


class NoActiveCharacterError(Exception):
    """Raised when a progress mutation is attempted with no active character."""


class PersistenceError(Exception):
    """Base exception for character persistence failures."""


class PersistenceIOError(PersistenceError):
    """Raised when the backing store cannot be read or written."""


class CorruptDataError(PersistenceError):
    """Raised when persisted or imported data cannot be decoded."""


class SaveLoadError(CorruptDataError):
    """Raised when a character payload fails validation."""
