"""Recursive unlock requirements for ROE categories and subcategories.

Requirements form an AND-only expression tree. ``AllOf`` is the only
combinator; there is no "any of" variant.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Tuple, Union

CompletionPredicate = Callable[[str], bool]


@dataclass(frozen=True, slots=True)
class NoRequirement:
    @property
    def display_text(self) -> str:
        return "Available from start"


@dataclass(frozen=True, slots=True)
class ObjectiveCount:
    count: int

    @property
    def display_text(self) -> str:
        return f"Complete {self.count} unique objectives"


@dataclass(frozen=True, slots=True)
class MissionRequirement:
    mission: str

    @property
    def display_text(self) -> str:
        return f"Complete mission: {self.mission}"


@dataclass(frozen=True, slots=True)
class QuestRequirement:
    quest: str

    @property
    def display_text(self) -> str:
        return f"Complete quest: {self.quest}"


@dataclass(frozen=True, slots=True)
class ObjectiveRequirement:
    """A specific ROE objective, matched by objective name."""

    objective: str

    @property
    def display_text(self) -> str:
        return f"Complete '{self.objective}'"


@dataclass(frozen=True, slots=True)
class AllOf:
    requirements: Tuple["UnlockRequirement", ...]

    @property
    def display_text(self) -> str:
        return " AND ".join(requirement.display_text for requirement in self.requirements)


UnlockRequirement = Union[
    NoRequirement,
    ObjectiveCount,
    MissionRequirement,
    QuestRequirement,
    ObjectiveRequirement,
    AllOf,
]

NO_REQUIREMENT = NoRequirement()


@dataclass(frozen=True, slots=True)
class RequirementContext:
    """Progress facts an unlock requirement is evaluated against.

    A missing predicate means that kind of requirement is not enforced and
    evaluates as met.
    """

    completed_objective_count: int
    is_mission_completed: CompletionPredicate | None = None
    is_quest_completed: CompletionPredicate | None = None
    is_objective_completed: CompletionPredicate | None = None


def is_requirement_met(requirement: UnlockRequirement, context: RequirementContext) -> bool:
    if isinstance(requirement, NoRequirement):
        return True
    if isinstance(requirement, ObjectiveCount):
        return context.completed_objective_count >= requirement.count
    if isinstance(requirement, MissionRequirement):
        return _check(context.is_mission_completed, requirement.mission)
    if isinstance(requirement, QuestRequirement):
        return _check(context.is_quest_completed, requirement.quest)
    if isinstance(requirement, ObjectiveRequirement):
        return _check(context.is_objective_completed, requirement.objective)
    if isinstance(requirement, AllOf):
        return all(is_requirement_met(entry, context) for entry in requirement.requirements)
    raise TypeError(f"Unsupported unlock requirement: {requirement!r}")


def _check(predicate: CompletionPredicate | None, key: str) -> bool:
    if predicate is None:
        return True
    return predicate(key)
