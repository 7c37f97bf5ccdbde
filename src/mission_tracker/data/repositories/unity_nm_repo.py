"""Repository for Unity notorious monster definitions."""
from __future__ import annotations

from pathlib import Path
from typing import List

from mission_tracker.data.repositories.base import RepositoryBase
from mission_tracker.domain.defs import (
    EtherealJunctionsDef,
    JunctionMapDef,
    UnityNmCatalogDef,
    UnityNmDef,
    UnmNotableRewardDef,
    UnmPointRewardsDef,
)

UNITY_NM_FILENAME = "unity-nms.json"


class UnityNmRepository(RepositoryBase[UnityNmCatalogDef]):
    """Loads and validates the Unity NM catalog."""

    def __init__(self, base_path: Path | str | None = None, filename: str = UNITY_NM_FILENAME) -> None:
        super().__init__(filename, base_path)

    def _build(self, raw: dict[str, object]) -> UnityNmCatalogDef:
        metadata = raw.get("metadata")
        metadata_map = self._require_mapping(metadata, "metadata") if metadata is not None else {}
        nms_data = self._require_list(raw.get("unity_notorious_monsters"), "unity_notorious_monsters")
        nms = [self._parse_nm(entry, f"unity_notorious_monsters[{index}]") for index, entry in enumerate(nms_data)]
        categories = self._str_list(metadata_map.get("categories"), "metadata.categories")
        if not categories:
            # Fall back to first-seen order when metadata omits the list.
            categories = list(dict.fromkeys(nm.category for nm in nms))
        return UnityNmCatalogDef(
            categories=tuple(categories),
            nms=tuple(nms),
            total_count=self._optional_int(metadata_map.get("total_count")),
        )

    def _parse_nm(self, value: object, ctx: str) -> UnityNmDef:
        mapping = self._require_mapping(value, ctx)
        return UnityNmDef(
            nm=self._require_str(mapping.get("nm"), f"{ctx}.nm"),
            level=self._require_int(mapping.get("level"), f"{ctx}.level"),
            accolades=self._require_int(mapping.get("accolades"), f"{ctx}.accolades"),
            zone=self._require_str(mapping.get("zone"), f"{ctx}.zone"),
            category=self._require_str(mapping.get("category"), f"{ctx}.category"),
            ethereal_junctions=self._parse_junctions(mapping.get("ethereal_junctions"), f"{ctx}.ethereal_junctions"),
            unity_warp=self._optional_str(mapping.get("unity_warp")),
            point_rewards=self._parse_point_rewards(mapping.get("point_rewards"), f"{ctx}.point_rewards"),
            notable_rewards=tuple(
                self._parse_notable_reward(entry, f"{ctx}.notable_rewards[{index}]")
                for index, entry in enumerate(
                    self._optional_list(mapping.get("notable_rewards"), f"{ctx}.notable_rewards")
                )
            ),
        )

    def _parse_junctions(self, value: object, ctx: str) -> EtherealJunctionsDef:
        entries = self._optional_list(value, ctx)
        if all(isinstance(entry, str) for entry in entries):
            return EtherealJunctionsDef(coords=tuple(entries))  # type: ignore[arg-type]
        maps: List[JunctionMapDef] = []
        for index, entry in enumerate(entries):
            mapping = self._require_mapping(entry, f"{ctx}[{index}]")
            maps.append(
                JunctionMapDef(
                    map=self._require_int(mapping.get("map"), f"{ctx}[{index}].map"),
                    coords=tuple(self._str_list(mapping.get("coords"), f"{ctx}[{index}].coords")),
                )
            )
        return EtherealJunctionsDef(maps=tuple(maps))

    def _parse_point_rewards(self, value: object, ctx: str) -> UnmPointRewardsDef | None:
        if value is None:
            return None
        mapping = self._require_mapping(value, ctx)
        return UnmPointRewardsDef(
            sparks=self._optional_int(mapping.get("sparks")) or 0,
            exp=self._optional_int(mapping.get("exp")) or 0,
            cp=self._optional_int(mapping.get("cp")) or 0,
        )

    def _parse_notable_reward(self, value: object, ctx: str) -> UnmNotableRewardDef:
        mapping = self._require_mapping(value, ctx)
        return UnmNotableRewardDef(
            item=self._require_str(mapping.get("item"), f"{ctx}.item"),
            url=self._optional_str(mapping.get("url")),
        )
