from mission_tracker.domain import eligibility
from mission_tracker.domain.defs import MissionDef

from tests.helpers.catalog_builders import make_abc_mission, make_node


def test_only_root_node_available_when_nothing_completed() -> None:
    mission = make_abc_mission()
    available = eligibility.available_nodes(mission, set())
    assert [node.id for node in available] == ["m1-A"]


def test_completing_a_unlocks_b_only() -> None:
    mission = make_abc_mission()
    completed = {"m1-A"}
    node_b = mission.nodes[1]
    node_c = mission.nodes[2]
    assert eligibility.can_start(node_b, completed)
    assert not eligibility.can_start(node_c, completed)
    assert [node.id for node in eligibility.available_nodes(mission, completed)] == ["m1-B"]


def test_node_without_dependencies_can_always_start() -> None:
    node = make_node("solo", 0)
    assert eligibility.can_start(node, set())


def test_completed_node_can_still_be_completed_regardless_of_order() -> None:
    # Out-of-order completion is allowed; eligibility is advisory.
    mission = make_abc_mission()
    completed = {"m1-C"}
    assert eligibility.completed_node_count(mission, completed) == 1
    assert not eligibility.is_mission_completed(mission, completed)


def test_mission_completion_and_fraction() -> None:
    mission = make_abc_mission()
    assert eligibility.progress_fraction(mission, {"m1-A"}) == 1 / 3
    all_done = {"m1-A", "m1-B", "m1-C"}
    assert eligibility.is_mission_completed(mission, all_done)
    assert eligibility.progress_fraction(mission, all_done) == 1.0
    assert eligibility.available_nodes(mission, all_done) == []


def test_empty_mission_reports_zero_progress() -> None:
    mission = MissionDef(id="empty", title="Empty", nodes=())
    assert eligibility.progress_fraction(mission, set()) == 0.0
    assert eligibility.completed_node_count(mission, set()) == 0


def test_available_nodes_sorted_by_order_index() -> None:
    mission = MissionDef(
        id="fan",
        title="Fan Out",
        nodes=(make_node("x", 2), make_node("y", 0), make_node("z", 1)),
    )
    assert [node.id for node in eligibility.available_nodes(mission, set())] == ["y", "z", "x"]


def test_ids_from_other_missions_do_not_count() -> None:
    mission = make_abc_mission("m1")
    assert eligibility.completed_node_count(mission, {"m2-A", "m2-B"}) == 0


def test_diamond_scenario_progression() -> None:
    mission = MissionDef(
        id="scenario",
        title="Scenario",
        nodes=(make_node("A", 0), make_node("B", 1, ["A"]), make_node("C", 2, ["A", "B"])),
    )
    node_c = mission.nodes[2]
    completed = {"A"}
    assert not eligibility.can_start(node_c, completed)
    completed.add("B")
    assert eligibility.can_start(node_c, completed)
    assert eligibility.progress_fraction(mission, completed) == 2 / 3
    completed.add("C")
    assert eligibility.is_mission_completed(mission, completed)
    assert eligibility.progress_fraction(mission, completed) == 1.0
