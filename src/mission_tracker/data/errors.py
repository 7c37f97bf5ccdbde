"""Custom exceptions for catalog loading and validation."""


class DataError(Exception):
    """Base exception for the data layer."""


class CatalogLoadError(DataError):
    """Raised when a catalog file cannot be turned into definitions."""

    def __init__(self, message: str, *, filename: str | None = None) -> None:
        super().__init__(message)
        self.filename = filename


class CatalogNotFoundError(CatalogLoadError):
    """Raised when a catalog file is missing or unreadable."""


class CatalogMalformedError(CatalogLoadError):
    """Raised when catalog content is not valid JSON or fails structural validation."""
