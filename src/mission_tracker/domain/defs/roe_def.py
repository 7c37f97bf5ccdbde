"""Records of Eminence objective definition data structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

GENERAL_SUBCATEGORY = "General"


@dataclass(frozen=True, slots=True)
class RoeRewardsDef:
    sparks: int | None = None
    exp: int | None = None
    accolades: int | None = None
    items: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RoeNpcDef:
    name: str
    url: str | None = None


@dataclass(frozen=True, slots=True)
class RoeObjectiveDef:
    name: str
    category: str
    subcategory: str
    description: str
    repeatable: bool = False
    objective_count: int | None = None
    rewards: RoeRewardsDef | None = None
    npcs: Tuple[RoeNpcDef, ...] = ()

    @property
    def id(self) -> str:
        return f"{self.category}|{self.subcategory}|{self.name}"

    @property
    def has_rewards(self) -> bool:
        if self.rewards is None:
            return False
        rewards = self.rewards
        return (
            rewards.sparks is not None
            or rewards.exp is not None
            or rewards.accolades is not None
            or bool(rewards.items)
        )


@dataclass(frozen=True, slots=True)
class RoeCategoryInfoDef:
    name: str
    subcategories: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RoeSubcategoryGroup:
    name: str
    category_name: str
    objectives: Tuple[RoeObjectiveDef, ...]

    @property
    def id(self) -> str:
        return f"{self.category_name}|{self.name}"


@dataclass(frozen=True, slots=True)
class RoeCategoryGroup:
    name: str
    subcategories: Tuple[RoeSubcategoryGroup, ...]

    @property
    def total_objectives(self) -> int:
        return sum(len(group.objectives) for group in self.subcategories)


@dataclass(frozen=True, slots=True)
class RoeCatalogDef:
    categories: Tuple[RoeCategoryInfoDef, ...]
    objectives: Tuple[RoeObjectiveDef, ...]
    version: str | None = None
    source: str | None = None
    source_url: str | None = None
    last_updated: str | None = None

    def group_objectives(self) -> list[RoeCategoryGroup]:
        """Group objectives by the declared category/subcategory order.

        Objectives with an empty subcategory are collected under "General" at
        the end of their category. Empty groups are dropped.
        """
        groups: list[RoeCategoryGroup] = []
        for info in self.categories:
            subgroups: list[RoeSubcategoryGroup] = []
            for subcategory in info.subcategories:
                matches = tuple(
                    objective
                    for objective in self.objectives
                    if objective.category == info.name and objective.subcategory == subcategory
                )
                if matches:
                    subgroups.append(
                        RoeSubcategoryGroup(name=subcategory, category_name=info.name, objectives=matches)
                    )
            unfiled = tuple(
                objective
                for objective in self.objectives
                if objective.category == info.name and not objective.subcategory
            )
            if unfiled:
                subgroups.append(
                    RoeSubcategoryGroup(
                        name=GENERAL_SUBCATEGORY, category_name=info.name, objectives=unfiled
                    )
                )
            if subgroups:
                groups.append(RoeCategoryGroup(name=info.name, subcategories=tuple(subgroups)))
        return groups
