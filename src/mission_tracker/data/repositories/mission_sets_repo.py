"""Repository for mission and quest set definitions."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Sequence

from mission_tracker.data.errors import CatalogLoadError
from mission_tracker.data.repositories.base import RepositoryBase
from mission_tracker.domain.defs import (
    GateDef,
    GateType,
    LocationDef,
    MissionDef,
    MissionImageDef,
    MissionNodeDef,
    MissionSetDef,
    RewardDef,
)

logger = logging.getLogger(__name__)

_GATE_TYPES = {gate_type.value: gate_type for gate_type in GateType}


class MissionSetFileRepository(RepositoryBase[MissionSetDef]):
    """Loads and validates one mission (or quest) set document."""

    def _build(self, raw: dict[str, object]) -> MissionSetDef:
        set_id = self._require_str(raw.get("id"), "mission set id")
        ctx = f"mission set '{set_id}'"
        missions_data = self._require_list(raw.get("missions"), f"{ctx} missions")
        missions: List[MissionDef] = []
        seen_ids: set[str] = set()
        for index, entry in enumerate(missions_data):
            mission = self._parse_mission(entry, f"{ctx} missions[{index}]")
            if mission.id in seen_ids:
                raise self._malformed(f"{ctx} has duplicate mission id '{mission.id}'.")
            seen_ids.add(mission.id)
            missions.append(mission)
        return MissionSetDef(
            id=set_id,
            name=self._require_str(raw.get("name"), f"{ctx} name"),
            category=self._optional_str(raw.get("category")) or "",
            missions=tuple(missions),
            source=self._optional_str(raw.get("source")),
            source_url=self._optional_str(raw.get("sourceUrl")),
            last_scraped=self._optional_str(raw.get("lastScraped")),
            last_known_update=self._optional_str(raw.get("lastKnownUpdate")),
        )

    def _parse_mission(self, value: object, ctx: str) -> MissionDef:
        mapping = self._require_mapping(value, ctx)
        mission_id = self._require_str(mapping.get("id"), f"{ctx}.id")
        nodes_data = self._require_list(mapping.get("nodes"), f"{ctx}.nodes")
        nodes = [self._parse_node(entry, f"{ctx}.nodes[{index}]") for index, entry in enumerate(nodes_data)]
        node_ids = {node.id for node in nodes}
        if len(node_ids) != len(nodes):
            raise self._malformed(f"{ctx} has duplicate node ids.")
        for node in nodes:
            foreign = node.dependencies - node_ids
            if foreign:
                raise self._malformed(
                    f"{ctx} node '{node.id}' depends on nodes outside the mission: {sorted(foreign)}."
                )
        gates = [
            self._parse_gate(entry, f"{ctx}.gates[{index}]")
            for index, entry in enumerate(self._optional_list(mapping.get("gates"), f"{ctx}.gates"))
        ]
        rewards = [
            self._parse_reward(entry, f"{ctx}.rewards[{index}]")
            for index, entry in enumerate(self._optional_list(mapping.get("rewards"), f"{ctx}.rewards"))
        ]
        images = [
            self._parse_image(entry, f"{ctx}.images[{index}]")
            for index, entry in enumerate(self._optional_list(mapping.get("images"), f"{ctx}.images"))
        ]
        return MissionDef(
            id=mission_id,
            title=self._require_str(mapping.get("title"), f"{ctx}.title"),
            nodes=tuple(sorted(nodes, key=lambda node: node.order_index)),
            gates=tuple(gates),
            number=self._optional_str(mapping.get("number")),
            url=self._optional_str(mapping.get("url")),
            nation=self._optional_str(mapping.get("nation")),
            rewards=tuple(rewards),
            images=tuple(images),
        )

    def _parse_node(self, value: object, ctx: str) -> MissionNodeDef:
        mapping = self._require_mapping(value, ctx)
        location_raw = mapping.get("location")
        location = None
        if isinstance(location_raw, dict):
            location = LocationDef(
                zone=self._optional_str(location_raw.get("zone")),
                coordinates=self._optional_str(location_raw.get("coordinates")),
                npc=self._optional_str(location_raw.get("npc")),
            )
        return MissionNodeDef(
            id=self._require_str(mapping.get("id"), f"{ctx}.id"),
            order_index=self._require_int(mapping.get("orderIndex"), f"{ctx}.orderIndex"),
            title=self._require_str(mapping.get("title"), f"{ctx}.title"),
            description=self._optional_str(mapping.get("description")) or "",
            dependencies=frozenset(self._str_list(mapping.get("dependencies"), f"{ctx}.dependencies")),
            location=location,
        )

    def _parse_gate(self, value: object, ctx: str) -> GateDef:
        mapping = self._require_mapping(value, ctx)
        raw_type = self._optional_str(mapping.get("type"))
        return GateDef(
            id=self._require_str(mapping.get("id"), f"{ctx}.id"),
            type=_GATE_TYPES.get(raw_type or "", GateType.OTHER),
            requirement=self._optional_str(mapping.get("requirement")) or "",
            description=self._optional_str(mapping.get("description")) or "",
            after_node_id=self._optional_str(mapping.get("afterNodeId")),
        )

    def _parse_reward(self, value: object, ctx: str) -> RewardDef:
        mapping = self._require_mapping(value, ctx)
        return RewardDef(
            name=self._require_str(mapping.get("name"), f"{ctx}.name"),
            type=self._optional_str(mapping.get("type")),
        )

    def _parse_image(self, value: object, ctx: str) -> MissionImageDef:
        mapping = self._require_mapping(value, ctx)
        return MissionImageDef(
            src=self._require_str(mapping.get("src"), f"{ctx}.src"),
            alt=self._optional_str(mapping.get("alt")) or "",
        )


class MissionSetsRepository:
    """Loads a batch of set files, skipping the ones that fail."""

    def __init__(self, filenames: Sequence[str], base_path: Path | str | None = None) -> None:
        self._files = [MissionSetFileRepository(_json_name(name), base_path) for name in filenames]
        self._definitions: Dict[str, MissionSetDef] | None = None
        self._errors: List[CatalogLoadError] = []

    def _ensure_loaded(self) -> None:
        if self._definitions is not None:
            return
        definitions: Dict[str, MissionSetDef] = {}
        errors: List[CatalogLoadError] = []
        for file_repo in self._files:
            try:
                mission_set = file_repo.load()
            except CatalogLoadError as exc:
                logger.warning("Skipping catalog file %s: %s", file_repo.filename, exc)
                errors.append(exc)
                continue
            if mission_set.id in definitions:
                logger.warning("Duplicate mission set id '%s' in %s ignored", mission_set.id, file_repo.filename)
                continue
            definitions[mission_set.id] = mission_set
        self._definitions = definitions
        self._errors = errors

    def get(self, set_id: str) -> MissionSetDef:
        """Return a set by id."""
        self._ensure_loaded()
        assert self._definitions is not None
        try:
            return self._definitions[set_id]
        except KeyError as exc:
            raise KeyError(set_id) from exc

    def all(self) -> list[MissionSetDef]:
        """Return the sets that loaded, in file order."""
        self._ensure_loaded()
        assert self._definitions is not None
        return list(self._definitions.values())

    @property
    def errors(self) -> list[CatalogLoadError]:
        self._ensure_loaded()
        return list(self._errors)


def _json_name(name: str) -> str:
    return name if name.endswith(".json") else f"{name}.json"
