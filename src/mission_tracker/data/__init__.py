"""Data layer utilities for loading JSON catalogs."""

from .errors import CatalogLoadError, CatalogMalformedError, CatalogNotFoundError, DataError
from .paths import get_catalog_path, get_repo_root

__all__ = [
    "CatalogLoadError",
    "CatalogMalformedError",
    "CatalogNotFoundError",
    "DataError",
    "get_catalog_path",
    "get_repo_root",
]
