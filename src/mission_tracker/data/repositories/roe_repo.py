"""Repository for Records of Eminence objectives."""
from __future__ import annotations

from pathlib import Path
from typing import List

from mission_tracker.data.repositories.base import RepositoryBase
from mission_tracker.domain.defs import (
    RoeCatalogDef,
    RoeCategoryInfoDef,
    RoeNpcDef,
    RoeObjectiveDef,
    RoeRewardsDef,
)

ROE_FILENAME = "roe-objectives.json"


class RoeRepository(RepositoryBase[RoeCatalogDef]):
    """Loads and validates the ROE objective catalog."""

    def __init__(self, base_path: Path | str | None = None, filename: str = ROE_FILENAME) -> None:
        super().__init__(filename, base_path)

    def _build(self, raw: dict[str, object]) -> RoeCatalogDef:
        categories: List[RoeCategoryInfoDef] = []
        for index, entry in enumerate(self._optional_list(raw.get("categories"), "categories")):
            mapping = self._require_mapping(entry, f"categories[{index}]")
            categories.append(
                RoeCategoryInfoDef(
                    name=self._require_str(mapping.get("name"), f"categories[{index}].name"),
                    subcategories=tuple(
                        self._str_list(mapping.get("subcategories"), f"categories[{index}].subcategories")
                    ),
                )
            )
        objectives_data = self._require_list(raw.get("objectives"), "objectives")
        objectives = [
            self._parse_objective(entry, f"objectives[{index}]") for index, entry in enumerate(objectives_data)
        ]
        return RoeCatalogDef(
            categories=tuple(categories),
            objectives=tuple(objectives),
            version=self._optional_str(raw.get("version")),
            source=self._optional_str(raw.get("source")),
            source_url=self._optional_str(raw.get("sourceUrl")),
            last_updated=self._optional_str(raw.get("lastUpdated")),
        )

    def _parse_objective(self, value: object, ctx: str) -> RoeObjectiveDef:
        mapping = self._require_mapping(value, ctx)
        repeatable = mapping.get("repeatable", False)
        if not isinstance(repeatable, bool):
            raise self._malformed(f"{ctx}.repeatable must be a boolean.")
        npcs: List[RoeNpcDef] = []
        for index, entry in enumerate(self._optional_list(mapping.get("npcs"), f"{ctx}.npcs")):
            npc_map = self._require_mapping(entry, f"{ctx}.npcs[{index}]")
            npcs.append(
                RoeNpcDef(
                    name=self._require_str(npc_map.get("name"), f"{ctx}.npcs[{index}].name"),
                    url=self._optional_str(npc_map.get("url")),
                )
            )
        return RoeObjectiveDef(
            name=self._require_str(mapping.get("name"), f"{ctx}.name"),
            category=self._require_str(mapping.get("category"), f"{ctx}.category"),
            subcategory=self._optional_str(mapping.get("subcategory")) or "",
            description=self._optional_str(mapping.get("description")) or "",
            repeatable=repeatable,
            objective_count=self._optional_int(mapping.get("objectiveCount")),
            rewards=self._parse_rewards(mapping.get("rewards"), f"{ctx}.rewards"),
            npcs=tuple(npcs),
        )

    def _parse_rewards(self, value: object, ctx: str) -> RoeRewardsDef | None:
        if value is None:
            return None
        mapping = self._require_mapping(value, ctx)
        items: List[str] = []
        for index, entry in enumerate(self._optional_list(mapping.get("items"), f"{ctx}.items")):
            item_map = self._require_mapping(entry, f"{ctx}.items[{index}]")
            items.append(self._require_str(item_map.get("name"), f"{ctx}.items[{index}].name"))
        return RoeRewardsDef(
            sparks=self._optional_int(mapping.get("sparks")),
            exp=self._optional_int(mapping.get("exp")),
            accolades=self._optional_int(mapping.get("accolades")),
            items=tuple(items),
        )
