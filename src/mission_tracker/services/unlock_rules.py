"""Static unlock rules for ROE categories and subcategories."""
from __future__ import annotations

from typing import Mapping

from mission_tracker.domain.unlock import (
    NO_REQUIREMENT,
    AllOf,
    CompletionPredicate,
    MissionRequirement,
    NoRequirement,
    ObjectiveCount,
    ObjectiveRequirement,
    QuestRequirement,
    RequirementContext,
    UnlockRequirement,
    is_requirement_met,
)

_FIRST_STEP_FORWARD = ObjectiveRequirement("First Step Forward")
_AMBUSCADE = ObjectiveRequirement("Stepping into an Ambuscade")

_TUTORIAL_SUBCATEGORIES = (
    "Basics",
    "Intermediate",
    "Synthesis",
    "Quests 1",
    "Quests (Artifact 1)",
    "Quests (Artifact 2)",
    "Quests (Artifact 3)",
    "Level Cap Increase",
    "Storage Expansion",
    "Quests (Weapon Skills)",
    "Missions (Rhapsodies of Vana'diel)",
    "Missions (San d'Oria)",
    "Missions (Bastok)",
    "Missions (Windurst)",
    "Missions (Zilart)",
    "Missions (Promathia)",
    "Missions (Aht Urhgan)",
    "Missions (Altana)",
    "Missions (Adoulin)",
)

_VANAVERSARY_SUBCATEGORIES = (
    "15th Vana'versary I",
    "15th Vana'versary II",
    "15th Vana'versary III",
    "15th Vana'versary IV",
    "15th Vana'versary V",
    "17th Vana'versary",
)

DEFAULT_UNLOCK_RULES: dict[str, UnlockRequirement] = {
    "Tutorial": NO_REQUIREMENT,
    **{f"Tutorial|{name}": NO_REQUIREMENT for name in _TUTORIAL_SUBCATEGORIES},
    "Combat (Wide Area)": NO_REQUIREMENT,
    "Combat (Region)": NO_REQUIREMENT,
    "Fishing": NO_REQUIREMENT,
    "Crafting": NO_REQUIREMENT,
    "Harvesting": NO_REQUIREMENT,
    "Content": NO_REQUIREMENT,
    "Achievements": NO_REQUIREMENT,
    "Unity": NO_REQUIREMENT,
    "Vana'versary": _FIRST_STEP_FORWARD,
    **{f"Vana'versary|{name}": _FIRST_STEP_FORWARD for name in _VANAVERSARY_SUBCATEGORIES},
    "Special Events": NO_REQUIREMENT,
    "Special Events|Vana'bout Daily": _AMBUSCADE,
    "Special Events|Vana'bout Round": _AMBUSCADE,
    "Other": NO_REQUIREMENT,
    "Other|RoE Quests": ObjectiveCount(50),
    "Other|RoE Quests 2": ObjectiveCount(100),
    "Other|RoE Quests 3": AllOf(
        (
            ObjectiveCount(150),
            MissionRequirement("Rise of Zilart: Awakening"),
            MissionRequirement("Chains of Promathia: Dawn"),
            QuestRequirement("Bundle of half-inscribed scrolls"),
        )
    ),
    "Other|RoE Quests 4": MissionRequirement("The Voracious Resurgence Mission 4-4"),
    "Other|Daily Objectives": NO_REQUIREMENT,
    "Other|Monthly Objectives": NO_REQUIREMENT,
    "Objective List": NO_REQUIREMENT,
    "Objective List|Limited-time Challenges": NO_REQUIREMENT,
}

DEFAULT_UNLOCK_NOTES: dict[str, str] = {
    "Other|RoE Quests": "Speak to Nantoto in Lower Jeuno after completing 50 objectives",
    "Other|RoE Quests 2": "Additional objectives unlock at 100, 150, 200+ completed",
    "Other|RoE Quests 3": "Requires 11+ Trusts from nation cities and specific key items from Jamal",
    "Other|RoE Quests 4": "Speak to Elijah in Upper Jeuno. More unlock with VR mission progress",
    "Special Events|Vana'bout Daily": "Found in Tutorial > Basics section",
    "Special Events|Vana'bout Round": "Found in Tutorial > Basics section",
}


def rule_key(category: str, subcategory: str | None = None) -> str:
    if subcategory is None:
        return category
    return f"{category}|{subcategory}"


class UnlockRuleTable:
    """Looks up and evaluates the unlock requirement for a category key."""

    def __init__(
        self,
        rules: Mapping[str, UnlockRequirement] | None = None,
        notes: Mapping[str, str] | None = None,
    ) -> None:
        self._rules = dict(DEFAULT_UNLOCK_RULES if rules is None else rules)
        self._notes = dict(DEFAULT_UNLOCK_NOTES if notes is None else notes)

    def requirement_for(self, category: str, subcategory: str | None = None) -> UnlockRequirement:
        """Subcategory rule first, then the category-wide rule, then no requirement."""
        if subcategory is not None:
            specific = self._rules.get(rule_key(category, subcategory))
            if specific is not None:
                return specific
        return self._rules.get(category, NO_REQUIREMENT)

    def is_unlocked(
        self,
        category: str,
        subcategory: str | None = None,
        *,
        completed_objective_count: int,
        is_mission_completed: CompletionPredicate | None = None,
        is_quest_completed: CompletionPredicate | None = None,
        is_objective_completed: CompletionPredicate | None = None,
    ) -> bool:
        context = RequirementContext(
            completed_objective_count=completed_objective_count,
            is_mission_completed=is_mission_completed,
            is_quest_completed=is_quest_completed,
            is_objective_completed=is_objective_completed,
        )
        return is_requirement_met(self.requirement_for(category, subcategory), context)

    def unlock_info(self, category: str, subcategory: str | None = None) -> str | None:
        """Human-readable requirement, or None when the category is open from the start."""
        requirement = self.requirement_for(category, subcategory)
        if isinstance(requirement, NoRequirement):
            return None
        return requirement.display_text

    def notes(self, category: str, subcategory: str | None = None) -> str | None:
        return self._notes.get(rule_key(category, subcategory))
