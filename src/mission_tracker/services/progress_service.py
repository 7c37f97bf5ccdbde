"""Progress tracking for the active character over a loaded catalog."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Set

from mission_tracker.core.types import PROGRESS_CATEGORIES, ProgressCategory, ProgressNamespace
from mission_tracker.domain import eligibility
from mission_tracker.domain.defs import Catalog, MissionDef, MissionNodeDef
from mission_tracker.domain.progress_state import Character, ProgressData, utc_now
from mission_tracker.services.character_registry import CharacterRegistry, ImportSummary
from mission_tracker.services.errors import CorruptDataError, NoActiveCharacterError, PersistenceError
from mission_tracker.services.persistence import PersistencePort
from mission_tracker.services.unlock_rules import UnlockRuleTable

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


@dataclass(slots=True)
class NodeStatusView:
    node_id: str
    title: str
    order_index: int
    completed: bool
    can_start: bool


@dataclass(slots=True)
class MissionProgressView:
    mission_id: str
    title: str
    completed_nodes: int
    total_nodes: int
    fraction: float
    is_completed: bool
    nodes: List[NodeStatusView]
    available_node_ids: List[str]


@dataclass(slots=True)
class ProgressUpdate:
    """Result of a mutation: what changed and the derived view the caller needs."""

    namespace: ProgressNamespace
    item_id: str
    completed: bool
    changed: bool
    last_updated: datetime
    mission: MissionProgressView | None = None


@dataclass(slots=True)
class CategoryStats:
    category: ProgressCategory
    completed: int
    total: int

    @property
    def percentage(self) -> float:
        if self.total <= 0:
            return 0.0
        return self.completed / self.total * 100


class ProgressService:
    """Completion queries and mutations for the registry's active character.

    Mission and quest completion is derived from node completion on every
    read. The mission/quest id sets on ProgressData are rewritten from the
    node set after each mutation so exports stay self-describing.
    """

    def __init__(
        self,
        *,
        catalog: Catalog,
        registry: CharacterRegistry,
        persistence: PersistencePort,
        unlock_rules: UnlockRuleTable | None = None,
        clock: Clock | None = None,
        enforce_story_unlocks: bool = False,
    ) -> None:
        self._catalog = catalog
        self._registry = registry
        self._persistence = persistence
        self._unlock_rules = unlock_rules or UnlockRuleTable()
        self._clock = clock or utc_now
        self._enforce_story_unlocks = enforce_story_unlocks
        self._missions: Dict[str, MissionDef] = {mission.id: mission for mission in catalog.iter_missions()}
        self._quests: Dict[str, MissionDef] = {quest.id: quest for quest in catalog.iter_quests()}
        self._node_owner: Dict[str, MissionDef] = {}
        for mission in list(self._missions.values()) + list(self._quests.values()):
            for node in mission.nodes:
                self._node_owner.setdefault(node.id, mission)

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    @property
    def registry(self) -> CharacterRegistry:
        return self._registry

    @property
    def unlock_rules(self) -> UnlockRuleTable:
        return self._unlock_rules

    @property
    def active_character(self) -> Character | None:
        return self._registry.active

    # Startup

    def load_state(self) -> bool:
        """Run the legacy migration, then restore persisted characters.

        Returns True when persisted characters were found. A corrupt or
        unreadable store is logged and leaves the registry empty.
        """
        try:
            self._persistence.migrate_legacy()
            state = self._persistence.load()
        except PersistenceError as exc:
            logger.error("Could not load saved characters: %s", exc)
            return False
        if state is None:
            return False
        self._registry.restore(state.characters, state.active_id)
        if self._sync_all():
            self._save()
        return True

    # Node namespace

    def complete_node(self, node_id: str) -> ProgressUpdate:
        return self._set_node(node_id, True)

    def uncomplete_node(self, node_id: str) -> ProgressUpdate:
        return self._set_node(node_id, False)

    def toggle_node(self, node_id: str) -> ProgressUpdate:
        return self._set_node(node_id, not self.is_node_completed(node_id))

    def is_node_completed(self, node_id: str) -> bool:
        return node_id in self._completed_node_ids()

    # Category namespaces

    def complete(self, category: ProgressCategory, item_id: str) -> ProgressUpdate:
        return self._set_item(category, item_id, True)

    def uncomplete(self, category: ProgressCategory, item_id: str) -> ProgressUpdate:
        return self._set_item(category, item_id, False)

    def toggle(self, category: ProgressCategory, item_id: str) -> ProgressUpdate:
        return self._set_item(category, item_id, not self.is_completed(category, item_id))

    def is_completed(self, category: ProgressCategory, item_id: str) -> bool:
        if category in ("mission", "quest"):
            story = self._story_def(category, item_id)
            return eligibility.is_mission_completed(story, self._completed_node_ids())
        progress = self._active_progress()
        if progress is None:
            return False
        return item_id in progress.ids_for(category)

    # Eligibility queries

    def can_start(self, node: MissionNodeDef) -> bool:
        return eligibility.can_start(node, self._completed_node_ids())

    def available_nodes(self, mission: MissionDef) -> List[MissionNodeDef]:
        return eligibility.available_nodes(mission, self._completed_node_ids())

    def is_mission_completed(self, mission: MissionDef) -> bool:
        return eligibility.is_mission_completed(mission, self._completed_node_ids())

    def mission_progress(self, mission: MissionDef) -> float:
        return eligibility.progress_fraction(mission, self._completed_node_ids())

    def build_mission_view(self, mission: MissionDef) -> MissionProgressView:
        completed_ids = self._completed_node_ids()
        nodes = [
            NodeStatusView(
                node_id=node.id,
                title=node.title,
                order_index=node.order_index,
                completed=node.id in completed_ids,
                can_start=eligibility.can_start(node, completed_ids),
            )
            for node in mission.nodes
        ]
        return MissionProgressView(
            mission_id=mission.id,
            title=mission.title,
            completed_nodes=eligibility.completed_node_count(mission, completed_ids),
            total_nodes=len(mission.nodes),
            fraction=eligibility.progress_fraction(mission, completed_ids),
            is_completed=eligibility.is_mission_completed(mission, completed_ids),
            nodes=nodes,
            available_node_ids=[node.id for node in eligibility.available_nodes(mission, completed_ids)],
        )

    # Unlocks

    def completed_objective_count(self) -> int:
        progress = self._active_progress()
        return len(progress.completed_roe_ids) if progress else 0

    def is_category_unlocked(self, category: str, subcategory: str | None = None) -> bool:
        if not self._enforce_story_unlocks:
            return self._unlock_rules.is_unlocked(
                category, subcategory, completed_objective_count=self.completed_objective_count()
            )
        return self._unlock_rules.is_unlocked(
            category,
            subcategory,
            completed_objective_count=self.completed_objective_count(),
            is_mission_completed=lambda key: self._story_key_completed(self._missions.values(), key),
            is_quest_completed=lambda key: self._story_key_completed(self._quests.values(), key),
            is_objective_completed=self._objective_name_completed,
        )

    def unlock_info(self, category: str, subcategory: str | None = None) -> str | None:
        return self._unlock_rules.unlock_info(category, subcategory)

    def unlock_notes(self, category: str, subcategory: str | None = None) -> str | None:
        return self._unlock_rules.notes(category, subcategory)

    # Statistics

    def category_stats(self, category: ProgressCategory) -> CategoryStats:
        if category in ("mission", "quest"):
            stories = self._stories(category)
            completed_ids = self._completed_node_ids()
            completed = sum(1 for story in stories if eligibility.is_mission_completed(story, completed_ids))
            return CategoryStats(category=category, completed=completed, total=len(stories))
        progress = self._active_progress()
        completed = len(progress.ids_for(category)) if progress else 0
        if category == "nm":
            total = len(self._catalog.unity_nms.nms) if self._catalog.unity_nms else 0
        else:
            total = len(self._catalog.roe.objectives) if self._catalog.roe else 0
        return CategoryStats(category=category, completed=completed, total=total)

    def overall_stats(self) -> List[CategoryStats]:
        return [self.category_stats(category) for category in PROGRESS_CATEGORIES]

    def total_nodes_completed(self) -> int:
        return len(self._completed_node_ids())

    @property
    def last_updated(self) -> datetime:
        progress = self._active_progress()
        return progress.last_updated if progress else self._clock()

    # Resets and playtime

    def reset_progress(self) -> None:
        character = self._require_active()
        progress = character.progress
        progress.completed_node_ids.clear()
        progress.completed_nm_ids.clear()
        progress.completed_roe_ids.clear()
        self._commit(character)

    def reset_category(self, category: ProgressCategory) -> None:
        character = self._require_active()
        progress = character.progress
        if category in ("mission", "quest"):
            node_ids: Set[str] = set()
            for story in self._stories(category):
                node_ids.update(story.node_ids)
            progress.completed_node_ids.difference_update(node_ids)
        else:
            progress.ids_for(category).clear()
        self._commit(character)

    def add_playtime(self, seconds: float) -> None:
        if not math.isfinite(seconds) or seconds < 0:
            raise ValueError("Playtime increments must be finite and non-negative.")
        character = self._require_active()
        character.progress.total_playtime_seconds += seconds
        self._commit(character)

    # Character management

    def add_character(self, name: str, server: str, job: str | None = None) -> Character:
        character = self._registry.add(name, server, job)
        self._save()
        return character

    def delete_character(self, character_id: str) -> None:
        self._registry.delete(character_id)
        self._save()

    def set_active_character(self, character_id: str) -> Character:
        character = self._registry.set_active(character_id)
        self._save()
        return character

    def update_character(self, character: Character) -> None:
        self._registry.update(character)
        self._sync_derived(character.progress)
        self._save()

    def export_characters(self, *, include_all: bool = False) -> str:
        if include_all:
            characters = self._registry.all()
        else:
            characters = [self._require_active()]
        return self._persistence.export_snapshot(characters)

    def import_characters(self, blob: str | bytes) -> ImportSummary:
        """Merge a snapshot into the registry; corrupt input raises CorruptDataError."""
        try:
            characters = self._persistence.import_snapshot(blob)
        except CorruptDataError:
            logger.warning("Rejected corrupt character snapshot")
            raise
        summary = self._registry.import_merge(characters)
        self._sync_all()
        self._save()
        return summary

    # Internals

    def _set_node(self, node_id: str, completed: bool) -> ProgressUpdate:
        character = self._require_active()
        node_ids = character.progress.completed_node_ids
        changed = (node_id in node_ids) != completed
        if completed:
            node_ids.add(node_id)
        else:
            node_ids.discard(node_id)
        self._commit(character)
        owner = self._node_owner.get(node_id)
        return ProgressUpdate(
            namespace="node",
            item_id=node_id,
            completed=completed,
            changed=changed,
            last_updated=character.progress.last_updated,
            mission=self.build_mission_view(owner) if owner else None,
        )

    def _set_item(self, category: ProgressCategory, item_id: str, completed: bool) -> ProgressUpdate:
        if category not in PROGRESS_CATEGORIES:
            raise ValueError(f"Unknown progress category '{category}'.")
        character = self._require_active()
        progress = character.progress
        view: MissionProgressView | None = None
        if category in ("mission", "quest"):
            story = self._story_def(category, item_id)
            changed = eligibility.is_mission_completed(story, progress.completed_node_ids) != completed
            if completed:
                progress.completed_node_ids.update(story.node_ids)
            else:
                progress.completed_node_ids.difference_update(story.node_ids)
        else:
            ids = progress.ids_for(category)
            changed = (item_id in ids) != completed
            if completed:
                ids.add(item_id)
            else:
                ids.discard(item_id)
        self._commit(character)
        if category in ("mission", "quest"):
            view = self.build_mission_view(self._story_def(category, item_id))
        return ProgressUpdate(
            namespace=category,
            item_id=item_id,
            completed=completed,
            changed=changed,
            last_updated=progress.last_updated,
            mission=view,
        )

    def _commit(self, character: Character) -> None:
        progress = character.progress
        progress.last_updated = self._clock()
        self._sync_derived(progress)
        self._save()

    def _sync_all(self) -> bool:
        """Rewrite the mission/quest caches of every character; True when any changed."""
        changed = False
        for character in self._registry.all():
            progress = character.progress
            before = (set(progress.completed_mission_ids), set(progress.completed_quest_ids))
            self._sync_derived(progress)
            if before != (progress.completed_mission_ids, progress.completed_quest_ids):
                changed = True
        return changed

    def _sync_derived(self, progress: ProgressData) -> None:
        completed_ids = progress.completed_node_ids
        progress.completed_mission_ids = {
            mission.id
            for mission in self._missions.values()
            if eligibility.is_mission_completed(mission, completed_ids)
        }
        progress.completed_quest_ids = {
            quest.id for quest in self._quests.values() if eligibility.is_mission_completed(quest, completed_ids)
        }

    def _save(self) -> None:
        try:
            self._persistence.save(self._registry.all(), self._registry.active_id)
        except PersistenceError as exc:
            logger.error("Saving characters failed; keeping in-memory state: %s", exc)

    def _require_active(self) -> Character:
        character = self._registry.active
        if character is None:
            raise NoActiveCharacterError("No active character selected.")
        return character

    def _active_progress(self) -> ProgressData | None:
        character = self._registry.active
        return character.progress if character else None

    def _completed_node_ids(self) -> Set[str]:
        progress = self._active_progress()
        return progress.completed_node_ids if progress else set()

    def _stories(self, category: ProgressCategory) -> List[MissionDef]:
        return list(self._missions.values() if category == "mission" else self._quests.values())

    def _story_def(self, category: ProgressCategory, item_id: str) -> MissionDef:
        lookup = self._missions if category == "mission" else self._quests
        try:
            return lookup[item_id]
        except KeyError as exc:
            raise KeyError(item_id) from exc

    def _story_key_completed(self, stories: Iterable[MissionDef], key: str) -> bool:
        completed_ids = self._completed_node_ids()
        for story in stories:
            if story.id == key or story.title == key:
                return eligibility.is_mission_completed(story, completed_ids)
        return False

    def _objective_name_completed(self, name: str) -> bool:
        progress = self._active_progress()
        if progress is None:
            return False
        return any(objective_id.rsplit("|", 1)[-1] == name for objective_id in progress.completed_roe_ids)
