"""Shared type aliases for the core and domain layers."""
from typing import Literal, Tuple

ProgressCategory = Literal["mission", "quest", "nm", "roe"]
ProgressNamespace = Literal["node", "mission", "quest", "nm", "roe"]

PROGRESS_CATEGORIES: Tuple[ProgressCategory, ...] = ("mission", "quest", "nm", "roe")

CATEGORY_LABELS = {
    "mission": "Mission",
    "quest": "Quest",
    "nm": "Unity NM",
    "roe": "ROE",
}

__all__ = ["ProgressCategory", "ProgressNamespace", "PROGRESS_CATEGORIES", "CATEGORY_LABELS"]
