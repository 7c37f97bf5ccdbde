import pytest

from mission_tracker.domain.unlock import (
    AllOf,
    MissionRequirement,
    NoRequirement,
    ObjectiveCount,
    ObjectiveRequirement,
    QuestRequirement,
    RequirementContext,
    is_requirement_met,
)
from mission_tracker.services.unlock_rules import UnlockRuleTable, rule_key


def test_objective_count_threshold() -> None:
    table = UnlockRuleTable()
    assert table.is_unlocked("Other", "RoE Quests", completed_objective_count=50)
    assert not table.is_unlocked("Other", "RoE Quests", completed_objective_count=49)


def test_all_of_is_conjunction() -> None:
    requirement = AllOf((ObjectiveCount(10), MissionRequirement("Alpha")))
    done = RequirementContext(completed_objective_count=10, is_mission_completed=lambda key: key == "Alpha")
    not_done = RequirementContext(completed_objective_count=10, is_mission_completed=lambda key: False)
    too_few = RequirementContext(completed_objective_count=9, is_mission_completed=lambda key: True)
    assert is_requirement_met(requirement, done)
    assert not is_requirement_met(requirement, not_done)
    assert not is_requirement_met(requirement, too_few)


def test_empty_all_of_is_met() -> None:
    assert is_requirement_met(AllOf(()), RequirementContext(completed_objective_count=0))


def test_story_requirements_permissive_without_predicates() -> None:
    context = RequirementContext(completed_objective_count=0)
    assert is_requirement_met(MissionRequirement("anything"), context)
    assert is_requirement_met(QuestRequirement("anything"), context)
    assert is_requirement_met(ObjectiveRequirement("First Step Forward"), context)


def test_unknown_requirement_type_raises() -> None:
    with pytest.raises(TypeError):
        is_requirement_met("not a requirement", RequirementContext(completed_objective_count=0))  # type: ignore[arg-type]


def test_subcategory_falls_back_to_category_then_open() -> None:
    table = UnlockRuleTable(rules={"Vana'versary": ObjectiveCount(5)})
    assert table.requirement_for("Vana'versary", "Unknown Sub") == ObjectiveCount(5)
    assert isinstance(table.requirement_for("Brand New"), NoRequirement)
    assert isinstance(table.requirement_for("Brand New", "Sub"), NoRequirement)


def test_subcategory_rule_takes_precedence() -> None:
    table = UnlockRuleTable(rules={"Other": NoRequirement(), "Other|Gated": ObjectiveCount(3)})
    assert not table.is_unlocked("Other", "Gated", completed_objective_count=2)
    assert table.is_unlocked("Other", completed_objective_count=0)


def test_roe_quests_3_enforced_with_predicates() -> None:
    table = UnlockRuleTable()
    missions_done = {"Rise of Zilart: Awakening"}
    kwargs = dict(
        completed_objective_count=150,
        is_mission_completed=lambda key: key in missions_done,
        is_quest_completed=lambda key: True,
    )
    assert not table.is_unlocked("Other", "RoE Quests 3", **kwargs)
    missions_done.add("Chains of Promathia: Dawn")
    assert table.is_unlocked("Other", "RoE Quests 3", **kwargs)


def test_vanaversary_requires_first_step_forward_when_enforced() -> None:
    table = UnlockRuleTable()
    assert table.is_unlocked("Vana'versary", completed_objective_count=0)
    assert not table.is_unlocked(
        "Vana'versary",
        "17th Vana'versary",
        completed_objective_count=0,
        is_objective_completed=lambda name: False,
    )


def test_unlock_info_and_notes() -> None:
    table = UnlockRuleTable()
    assert table.unlock_info("Tutorial") is None
    assert table.unlock_info("Other", "RoE Quests") == "Complete 50 unique objectives"
    info = table.unlock_info("Other", "RoE Quests 3")
    assert info is not None
    assert info.startswith("Complete 150 unique objectives AND Complete mission: ")
    assert " AND Complete quest: Bundle of half-inscribed scrolls" in info
    assert table.notes("Other", "RoE Quests") == "Speak to Nantoto in Lower Jeuno after completing 50 objectives"
    assert table.notes("Tutorial") is None


def test_rule_key_format() -> None:
    assert rule_key("Other") == "Other"
    assert rule_key("Other", "RoE Quests") == "Other|RoE Quests"
