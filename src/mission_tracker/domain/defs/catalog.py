"""The immutable catalog snapshot handed to the progress service."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

from .mission_def import MissionDef, MissionSetDef
from .roe_def import RoeCatalogDef
from .unity_nm_def import UnityNmCatalogDef


@dataclass(frozen=True, slots=True)
class Catalog:
    mission_sets: Tuple[MissionSetDef, ...] = ()
    quest_sets: Tuple[MissionSetDef, ...] = ()
    roe: RoeCatalogDef | None = None
    unity_nms: UnityNmCatalogDef | None = None
    errors: Tuple[Exception, ...] = ()

    def iter_missions(self) -> Iterator[MissionDef]:
        for mission_set in self.mission_sets:
            yield from mission_set.missions

    def iter_quests(self) -> Iterator[MissionDef]:
        for quest_set in self.quest_sets:
            yield from quest_set.missions
