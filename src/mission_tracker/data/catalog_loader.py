"""Assembles the immutable catalog snapshot from the bundled JSON files."""
from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from pathlib import Path
from typing import List, Sequence

from mission_tracker.data.errors import CatalogLoadError
from mission_tracker.data.repositories import MissionSetsRepository, RoeRepository, UnityNmRepository
from mission_tracker.domain.defs import Catalog, RoeCatalogDef, UnityNmCatalogDef

logger = logging.getLogger(__name__)

DEFAULT_MISSION_FILES: tuple[str, ...] = (
    # Nation missions
    "ffxiclopedia-bastok",
    "ffxiclopedia-sandoria",
    "ffxiclopedia-windurst",
    # Expansion missions, chronological
    "ffxiclopedia-zilart",
    "ffxiclopedia-promathia",
    "ffxiclopedia-aht-urhgan",
    "ffxiclopedia-wings-goddess",
    "ffxiclopedia-seekers-adoulin",
    "ffxiclopedia-rhapsodies",
    "ffxiclopedia-voracious-resurgence",
    "ffxiclopedia-campaign",
    "ffxiclopedia-coalition",
)

DEFAULT_QUEST_FILES: tuple[str, ...] = (
    "ffxiclopedia-bastok-quests",
    "ffxiclopedia-sandoria-quests",
    "ffxiclopedia-windurst-quests",
    "ffxiclopedia-jeuno-quests",
    "ffxiclopedia-aht-urhgan-quests",
    "ffxiclopedia-abyssea-quests",
    "ffxiclopedia-adoulin-quests",
    "ffxiclopedia-crystal-war-quests",
    "ffxiclopedia-wings-goddess-quests",
    "ffxiclopedia-outlands-quests",
)


def load_catalog(
    base_path: Path | str | None = None,
    *,
    mission_files: Sequence[str] = DEFAULT_MISSION_FILES,
    quest_files: Sequence[str] = DEFAULT_QUEST_FILES,
    include_roe: bool = True,
    include_unity_nms: bool = True,
) -> Catalog:
    """Load every catalog file, collecting per-file failures instead of raising."""
    errors: List[CatalogLoadError] = []

    missions_repo = MissionSetsRepository(mission_files, base_path)
    quests_repo = MissionSetsRepository(quest_files, base_path)
    mission_sets = missions_repo.all()
    quest_sets = quests_repo.all()
    errors.extend(missions_repo.errors)
    errors.extend(quests_repo.errors)

    roe: RoeCatalogDef | None = None
    if include_roe:
        roe_repo = RoeRepository(base_path)
        try:
            roe = roe_repo.load()
        except CatalogLoadError as exc:
            logger.warning("ROE catalog unavailable: %s", exc)
            errors.append(exc)

    unity_nms: UnityNmCatalogDef | None = None
    if include_unity_nms:
        nm_repo = UnityNmRepository(base_path)
        try:
            unity_nms = nm_repo.load()
        except CatalogLoadError as exc:
            logger.warning("Unity NM catalog unavailable: %s", exc)
            errors.append(exc)

    logger.info(
        "Catalog loaded: %d mission sets, %d quest sets, %d failures",
        len(mission_sets),
        len(quest_sets),
        len(errors),
    )
    return Catalog(
        mission_sets=tuple(mission_sets),
        quest_sets=tuple(quest_sets),
        roe=roe,
        unity_nms=unity_nms,
        errors=tuple(errors),
    )


def load_catalog_in_background(
    base_path: Path | str | None = None,
    *,
    executor: Executor | None = None,
    **options,
) -> Future[Catalog]:
    """Load the catalog on a worker thread and hand back a future snapshot."""
    if executor is not None:
        return executor.submit(load_catalog, base_path, **options)
    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="catalog-loader")
    future = pool.submit(load_catalog, base_path, **options)
    pool.shutdown(wait=False)
    return future
