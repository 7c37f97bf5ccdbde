"""Pure completion and eligibility queries over mission dependency graphs."""
from __future__ import annotations

from typing import AbstractSet, List

from mission_tracker.domain.defs import MissionDef, MissionNodeDef


def can_start(node: MissionNodeDef, completed_node_ids: AbstractSet[str]) -> bool:
    """Return True when every dependency of ``node`` has been completed."""
    return all(dependency in completed_node_ids for dependency in node.dependencies)


def completed_node_count(mission: MissionDef, completed_node_ids: AbstractSet[str]) -> int:
    return sum(1 for node in mission.nodes if node.id in completed_node_ids)


def is_mission_completed(mission: MissionDef, completed_node_ids: AbstractSet[str]) -> bool:
    return all(node.id in completed_node_ids for node in mission.nodes)


def progress_fraction(mission: MissionDef, completed_node_ids: AbstractSet[str]) -> float:
    """Return completed/total in [0, 1]; an empty mission reports 0."""
    total = len(mission.nodes)
    if total == 0:
        return 0.0
    return completed_node_count(mission, completed_node_ids) / total


def available_nodes(mission: MissionDef, completed_node_ids: AbstractSet[str]) -> List[MissionNodeDef]:
    """Return incomplete nodes whose dependencies are met, in order_index order."""
    candidates = [
        node
        for node in mission.nodes
        if node.id not in completed_node_ids and can_start(node, completed_node_ids)
    ]
    return sorted(candidates, key=lambda node: node.order_index)
