"""Unity notorious monster definition data structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True, slots=True)
class JunctionMapDef:
    map: int
    coords: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class EtherealJunctionsDef:
    """Junction coordinates, either a flat list or split per map."""

    coords: Tuple[str, ...] = ()
    maps: Tuple[JunctionMapDef, ...] = ()

    @property
    def display(self) -> str:
        if self.maps:
            return " | ".join(f"Map {entry.map}: {', '.join(entry.coords)}" for entry in self.maps)
        return ", ".join(self.coords)


@dataclass(frozen=True, slots=True)
class UnmPointRewardsDef:
    sparks: int = 0
    exp: int = 0
    cp: int = 0


@dataclass(frozen=True, slots=True)
class UnmNotableRewardDef:
    item: str
    url: str | None = None


@dataclass(frozen=True, slots=True)
class UnityNmDef:
    nm: str
    level: int
    accolades: int
    zone: str
    category: str
    ethereal_junctions: EtherealJunctionsDef = EtherealJunctionsDef()
    unity_warp: str | None = None
    point_rewards: UnmPointRewardsDef | None = None
    notable_rewards: Tuple[UnmNotableRewardDef, ...] = ()

    @property
    def id(self) -> str:
        return self.nm


@dataclass(frozen=True, slots=True)
class UnmCategoryGroup:
    name: str
    nms: Tuple[UnityNmDef, ...]

    @property
    def level_range(self) -> str:
        if not self.nms:
            return "Unknown"
        low = min(nm.level for nm in self.nms)
        high = max(nm.level for nm in self.nms)
        return f"Lv. {low}" if low == high else f"Lv. {low}-{high}"

    @property
    def accolade_range(self) -> str:
        if not self.nms:
            return "Unknown"
        low = min(nm.accolades for nm in self.nms)
        high = max(nm.accolades for nm in self.nms)
        return str(low) if low == high else f"{low}-{high}"


@dataclass(frozen=True, slots=True)
class UnityNmCatalogDef:
    categories: Tuple[str, ...]
    nms: Tuple[UnityNmDef, ...]
    total_count: int | None = None

    def group_by_category(self) -> list[UnmCategoryGroup]:
        """Group NMs in metadata category order, sorted by level then name."""
        groups: list[UnmCategoryGroup] = []
        for category in self.categories:
            members = sorted(
                (nm for nm in self.nms if nm.category == category),
                key=lambda nm: (nm.level, nm.nm),
            )
            if members:
                groups.append(UnmCategoryGroup(name=category, nms=tuple(members)))
        return groups
