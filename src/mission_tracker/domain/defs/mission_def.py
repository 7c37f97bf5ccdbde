"""Mission and quest catalog definition data structures."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Tuple


class GateType(str, Enum):
    LEVEL = "level"
    MISSION = "mission"
    MISSION_SET = "missionSet"
    ITEM = "item"
    NODE = "node"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class LocationDef:
    zone: str | None = None
    coordinates: str | None = None
    npc: str | None = None


@dataclass(frozen=True, slots=True)
class MissionNodeDef:
    id: str
    order_index: int
    title: str
    description: str
    dependencies: FrozenSet[str]
    location: LocationDef | None = None


@dataclass(frozen=True, slots=True)
class GateDef:
    """Informational requirement shown alongside a mission; never blocks nodes."""

    id: str
    type: GateType
    requirement: str
    description: str
    after_node_id: str | None = None


@dataclass(frozen=True, slots=True)
class RewardDef:
    name: str
    type: str | None = None


@dataclass(frozen=True, slots=True)
class MissionImageDef:
    src: str
    alt: str


@dataclass(frozen=True, slots=True)
class MissionDef:
    """A mission or quest: an ordered set of nodes with dependency edges."""

    id: str
    title: str
    nodes: Tuple[MissionNodeDef, ...]
    gates: Tuple[GateDef, ...] = ()
    number: str | None = None
    url: str | None = None
    nation: str | None = None
    rewards: Tuple[RewardDef, ...] = ()
    images: Tuple[MissionImageDef, ...] = ()

    @property
    def node_ids(self) -> FrozenSet[str]:
        return frozenset(node.id for node in self.nodes)

    @property
    def zones(self) -> list[str]:
        """Sorted unique zones visited by this mission's nodes."""
        return sorted({node.location.zone for node in self.nodes if node.location and node.location.zone})

    def dependent_nodes(self, node_id: str) -> list[MissionNodeDef]:
        return [node for node in self.nodes if node_id in node.dependencies]


@dataclass(frozen=True, slots=True)
class MissionSetDef:
    id: str
    name: str
    category: str
    missions: Tuple[MissionDef, ...]
    source: str | None = None
    source_url: str | None = None
    last_scraped: str | None = None
    last_known_update: str | None = None

    def missions_in_zone(self, zone: str) -> list[MissionDef]:
        return [mission for mission in self.missions if zone in mission.zones]
