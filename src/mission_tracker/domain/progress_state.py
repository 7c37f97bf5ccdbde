"""Per-character progress state data structures."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Set

from mission_tracker.core.types import ProgressCategory


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_character_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class CompletionStats:
    missions: int
    quests: int
    unity_nms: int
    roe: int
    total: int


@dataclass
class ProgressData:
    """Completed ids for one character across independent namespaces.

    ``completed_mission_ids`` and ``completed_quest_ids`` mirror what the node
    set implies; they are rewritten from node completion and never read as
    the source of truth.
    """

    completed_node_ids: Set[str] = field(default_factory=set)
    completed_mission_ids: Set[str] = field(default_factory=set)
    completed_quest_ids: Set[str] = field(default_factory=set)
    completed_nm_ids: Set[str] = field(default_factory=set)
    completed_roe_ids: Set[str] = field(default_factory=set)
    last_updated: datetime = field(default_factory=utc_now)
    total_playtime_seconds: float = 0.0

    def ids_for(self, category: ProgressCategory) -> Set[str]:
        if category == "mission":
            return self.completed_mission_ids
        if category == "quest":
            return self.completed_quest_ids
        if category == "nm":
            return self.completed_nm_ids
        if category == "roe":
            return self.completed_roe_ids
        raise ValueError(f"Unknown progress category '{category}'.")


@dataclass
class Character:
    name: str
    server: str
    job: str | None = None
    id: str = field(default_factory=new_character_id)
    created_date: datetime = field(default_factory=utc_now)
    progress: ProgressData = field(default_factory=ProgressData)

    @property
    def display_name(self) -> str:
        if self.job:
            return f"{self.name} ({self.job})"
        return self.name

    @property
    def completion_stats(self) -> CompletionStats:
        progress = self.progress
        return CompletionStats(
            missions=len(progress.completed_mission_ids),
            quests=len(progress.completed_quest_ids),
            unity_nms=len(progress.completed_nm_ids),
            roe=len(progress.completed_roe_ids),
            total=len(progress.completed_node_ids),
        )

    @property
    def formatted_playtime(self) -> str:
        seconds = int(self.progress.total_playtime_seconds)
        hours, remainder = divmod(seconds, 3600)
        minutes = remainder // 60
        if hours > 0:
            return f"{hours}h {minutes}m"
        return f"{minutes}m"
