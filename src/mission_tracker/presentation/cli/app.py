"""Console-driven menus for the mission tracker."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Literal, Sequence

from mission_tracker.core.types import CATEGORY_LABELS
from mission_tracker.data.catalog_loader import load_catalog_in_background
from mission_tracker.domain.defs import (
    Catalog,
    MissionDef,
    MissionSetDef,
    RoeCategoryGroup,
    RoeSubcategoryGroup,
    UnmCategoryGroup,
)
from mission_tracker.domain.progress_state import Character
from mission_tracker.presentation.cli import config as cli_config
from mission_tracker.presentation.cli.kv_store import JsonFileKeyValueStore
from mission_tracker.services import (
    CategoryStats,
    CharacterRegistry,
    CorruptDataError,
    KeyValuePersistence,
    KeyValueStore,
    MissionProgressView,
    ProgressService,
    RegistryError,
)

MenuAction = Literal["characters", "missions", "quests", "roe", "nms", "stats", "export", "import", "quit"]

_MAIN_MENU: Sequence[tuple[str, MenuAction]] = (
    ("Characters", "characters"),
    ("Missions", "missions"),
    ("Quests", "quests"),
    ("Records of Eminence", "roe"),
    ("Unity NMs", "nms"),
    ("Statistics", "stats"),
    ("Export characters", "export"),
    ("Import characters", "import"),
    ("Quit", "quit"),
)
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def main() -> None:
    """Start the interactive CLI session."""
    config = cli_config.load_config()
    logging.basicConfig(level=cli_config.resolve_log_level(config), format=_LOG_FORMAT)
    print("=== Mission Tracker ===")
    print("Loading catalog...")
    catalog = load_catalog_in_background(config.catalog_dir).result()
    if catalog.errors:
        print(f"{len(catalog.errors)} catalog file(s) could not be loaded.")
    service = _build_progress_service(catalog, config)
    service.load_state()
    running = True
    while running:
        action = _main_menu_loop(service)
        if action == "quit":
            running = False
        elif action == "characters":
            _run_character_menu(service)
        elif action == "missions":
            _run_story_browser(service, service.catalog.mission_sets)
        elif action == "quests":
            _run_story_browser(service, service.catalog.quest_sets)
        elif action == "roe":
            _run_roe_browser(service)
        elif action == "nms":
            _run_nm_browser(service)
        elif action == "stats":
            for line in _format_stats_lines(service):
                print(line)
        elif action == "export":
            _export_characters(service)
        elif action == "import":
            _import_characters(service)
    print("Goodbye!")


def _build_progress_service(
    catalog: Catalog,
    config: cli_config.TrackerConfig,
    *,
    store: KeyValueStore | None = None,
) -> ProgressService:
    """Construct the ProgressService with a file-backed store."""
    registry = CharacterRegistry(max_characters=config.max_characters)
    persistence = KeyValuePersistence(store if store is not None else JsonFileKeyValueStore())
    return ProgressService(
        catalog=catalog,
        registry=registry,
        persistence=persistence,
        enforce_story_unlocks=config.enforce_story_unlocks,
    )


def _main_menu_loop(service: ProgressService) -> MenuAction:
    print()
    active = service.active_character
    print(f"Main Menu ({active.display_name if active else 'no character selected'})")
    for index, (label, _) in enumerate(_MAIN_MENU, start=1):
        print(f"{index}. {label}")
    choice = _prompt_index(len(_MAIN_MENU))
    return _MAIN_MENU[choice][1]


def _prompt_index(count: int, prompt: str = "Select an option: ", *, allow_back: bool = False) -> int:
    """Read a 1-based menu selection and return it 0-based; -1 means back."""
    while True:
        raw_value = input(prompt).strip()
        if allow_back and raw_value == "":
            return -1
        if raw_value.isdigit():
            value = int(raw_value)
            if 1 <= value <= count:
                return value - 1
        print(f"Invalid selection. Please enter a number from 1 to {count}.")


# Characters


def _character_menu_options(service: ProgressService) -> List[str]:
    options: List[str] = []
    if service.registry.can_add:
        options.append("Add character")
    if len(service.registry):
        options.extend(["Select character", "Delete character"])
    options.append("Back")
    return options


def _format_character_line(character: Character, *, active_id: str | None) -> str:
    marker = "*" if character.id == active_id else " "
    stats = character.completion_stats
    return (
        f"{marker} {character.display_name} [{character.server}] "
        f"- {stats.total} steps, {character.formatted_playtime}"
    )


def _run_character_menu(service: ProgressService) -> None:
    while True:
        registry = service.registry
        print()
        print(f"Characters ({len(registry)}/{registry.character_limit})")
        for character in registry.all():
            print(_format_character_line(character, active_id=registry.active_id))
        options = _character_menu_options(service)
        for index, label in enumerate(options, start=1):
            print(f"{index}. {label}")
        selected = options[_prompt_index(len(options))]
        if selected == "Back":
            return
        if selected == "Add character":
            _prompt_add_character(service)
        elif selected == "Select character":
            character = _prompt_character_choice(registry.all())
            if character is not None:
                service.set_active_character(character.id)
                print(f"Active character: {character.display_name}")
        elif selected == "Delete character":
            character = _prompt_character_choice(registry.all())
            if character is not None:
                service.delete_character(character.id)
                print(f"Deleted {character.display_name}.")


def _prompt_add_character(service: ProgressService) -> None:
    name = input("Character name: ")
    server = input("Server: ")
    job = input("Job (optional): ").strip() or None
    try:
        character = service.add_character(name, server, job)
    except RegistryError as exc:
        print(str(exc))
        return
    print(f"Added {character.display_name}.")


def _prompt_character_choice(characters: Sequence[Character]) -> Character | None:
    for index, character in enumerate(characters, start=1):
        print(f"{index}. {character.display_name}")
    choice = _prompt_index(len(characters), "Choose a character (blank to cancel): ", allow_back=True)
    if choice < 0:
        return None
    return characters[choice]


# Missions and quests


def _run_story_browser(service: ProgressService, sets: Sequence[MissionSetDef]) -> None:
    if service.active_character is None:
        print("Create or select a character first.")
        return
    if not sets:
        print("No entries are loaded.")
        return
    while True:
        print()
        for index, story_set in enumerate(sets, start=1):
            print(f"{index}. {story_set.name} ({len(story_set.missions)})")
        choice = _prompt_index(len(sets), "Choose a set (blank to go back): ", allow_back=True)
        if choice < 0:
            return
        _run_mission_list(service, sets[choice])


def _run_mission_list(service: ProgressService, story_set: MissionSetDef) -> None:
    missions = list(story_set.missions)
    if not missions:
        print("This set is empty.")
        return
    while True:
        print()
        print(story_set.name)
        for index, mission in enumerate(missions, start=1):
            done = "x" if service.is_mission_completed(mission) else " "
            percent = int(service.mission_progress(mission) * 100)
            print(f"{index}. [{done}] {mission.title} ({percent}%)")
        choice = _prompt_index(len(missions), "Choose a mission (blank to go back): ", allow_back=True)
        if choice < 0:
            return
        _run_mission_view(service, missions[choice])


def _format_mission_view(view: MissionProgressView) -> List[str]:
    lines = [f"{view.title}: {view.completed_nodes}/{view.total_nodes} steps"]
    for index, node in enumerate(view.nodes, start=1):
        if node.completed:
            status = "x"
        elif node.can_start:
            status = " "
        else:
            status = "-"
        lines.append(f"{index}. [{status}] {node.title}")
    if view.is_completed:
        lines.append("Mission complete!")
    return lines


def _run_mission_view(service: ProgressService, mission: MissionDef) -> None:
    while True:
        view = service.build_mission_view(mission)
        print()
        for line in _format_mission_view(view):
            print(line)
        if not view.nodes:
            return
        choice = _prompt_index(len(view.nodes), "Toggle a step (blank to go back): ", allow_back=True)
        if choice < 0:
            return
        update = service.toggle_node(view.nodes[choice].node_id)
        if update.mission is not None and update.mission.is_completed and update.completed:
            print(f"Completed {update.mission.title}.")


# Records of Eminence and Unity NMs


def _format_roe_category_line(service: ProgressService, group: RoeCategoryGroup) -> str:
    done = sum(
        1
        for subgroup in group.subcategories
        for objective in subgroup.objectives
        if service.is_completed("roe", objective.id)
    )
    line = f"{group.name} ({done}/{group.total_objectives})"
    if not service.is_category_unlocked(group.name):
        line += f" [locked: {service.unlock_info(group.name)}]"
    return line


def _format_roe_subcategory_lines(service: ProgressService, subgroup: RoeSubcategoryGroup) -> List[str]:
    category, subcategory = subgroup.category_name, subgroup.name
    header = f"{category} > {subcategory}"
    lines: List[str] = []
    if service.is_category_unlocked(category, subcategory):
        lines.append(header)
    else:
        lines.append(f"{header} [locked: {service.unlock_info(category, subcategory)}]")
    notes = service.unlock_notes(category, subcategory)
    if notes:
        lines.append(f"Note: {notes}")
    for index, objective in enumerate(subgroup.objectives, start=1):
        done = "x" if service.is_completed("roe", objective.id) else " "
        suffix = " (repeatable)" if objective.repeatable else ""
        lines.append(f"{index}. [{done}] {objective.name}{suffix}")
    return lines


def _run_roe_browser(service: ProgressService) -> None:
    roe = service.catalog.roe
    if service.active_character is None:
        print("Create or select a character first.")
        return
    groups = roe.group_objectives() if roe is not None else []
    if not groups:
        print("No Records of Eminence are loaded.")
        return
    while True:
        print()
        for index, group in enumerate(groups, start=1):
            print(f"{index}. {_format_roe_category_line(service, group)}")
        choice = _prompt_index(len(groups), "Choose a category (blank to go back): ", allow_back=True)
        if choice < 0:
            return
        _run_roe_category(service, groups[choice])


def _run_roe_category(service: ProgressService, group: RoeCategoryGroup) -> None:
    subgroups = list(group.subcategories)
    while True:
        print()
        for index, subgroup in enumerate(subgroups, start=1):
            print(f"{index}. {subgroup.name} ({len(subgroup.objectives)})")
        choice = _prompt_index(len(subgroups), "Choose a section (blank to go back): ", allow_back=True)
        if choice < 0:
            return
        _run_roe_objectives(service, subgroups[choice])


def _run_roe_objectives(service: ProgressService, subgroup: RoeSubcategoryGroup) -> None:
    while True:
        print()
        for line in _format_roe_subcategory_lines(service, subgroup):
            print(line)
        count = len(subgroup.objectives)
        choice = _prompt_index(count, "Toggle an objective (blank to go back): ", allow_back=True)
        if choice < 0:
            return
        service.toggle("roe", subgroup.objectives[choice].id)


def _format_nm_group_lines(service: ProgressService, group: UnmCategoryGroup) -> List[str]:
    done = sum(1 for nm in group.nms if service.is_completed("nm", nm.id))
    lines = [f"{group.name} {group.level_range}, {group.accolade_range} accolades ({done}/{len(group.nms)})"]
    for index, nm in enumerate(group.nms, start=1):
        mark = "x" if service.is_completed("nm", nm.id) else " "
        lines.append(f"{index}. [{mark}] {nm.nm} (Lv. {nm.level}, {nm.zone})")
    return lines


def _run_nm_browser(service: ProgressService) -> None:
    unity_nms = service.catalog.unity_nms
    if service.active_character is None:
        print("Create or select a character first.")
        return
    groups = unity_nms.group_by_category() if unity_nms is not None else []
    if not groups:
        print("No Unity NMs are loaded.")
        return
    while True:
        print()
        for index, group in enumerate(groups, start=1):
            print(f"{index}. {group.name} ({len(group.nms)})")
        choice = _prompt_index(len(groups), "Choose a category (blank to go back): ", allow_back=True)
        if choice < 0:
            return
        _run_nm_group(service, groups[choice])


def _run_nm_group(service: ProgressService, group: UnmCategoryGroup) -> None:
    while True:
        print()
        for line in _format_nm_group_lines(service, group):
            print(line)
        choice = _prompt_index(len(group.nms), "Toggle an NM (blank to go back): ", allow_back=True)
        if choice < 0:
            return
        service.toggle("nm", group.nms[choice].id)


# Statistics and transfer


def _format_stats_lines(service: ProgressService) -> List[str]:
    active = service.active_character
    if active is None:
        return ["No character selected."]
    lines = [f"Statistics for {active.display_name}"]
    for stats in service.overall_stats():
        lines.append(_format_category_stats(stats))
    lines.append(f"Steps completed: {service.total_nodes_completed()}")
    lines.append(f"Playtime: {active.formatted_playtime}")
    return lines


def _format_category_stats(stats: CategoryStats) -> str:
    label = CATEGORY_LABELS[stats.category]
    return f"{label}: {stats.completed}/{stats.total} ({stats.percentage:.1f}%)"


def _export_characters(service: ProgressService) -> None:
    if service.active_character is None:
        print("Create or select a character first.")
        return
    raw_path = input("Export to file: ").strip()
    if not raw_path:
        return
    include_all = input("Export all characters? [y/N]: ").strip().lower() == "y"
    blob = service.export_characters(include_all=include_all)
    try:
        Path(raw_path).expanduser().write_text(blob, encoding="utf-8")
    except OSError as exc:
        logger.error("Export to %s failed: %s", raw_path, exc)
        print(f"Could not write {raw_path}.")
        return
    print(f"Exported to {raw_path}.")


def _import_characters(service: ProgressService) -> None:
    raw_path = input("Import from file: ").strip()
    if not raw_path:
        return
    try:
        blob = Path(raw_path).expanduser().read_text(encoding="utf-8")
    except OSError as exc:
        logger.error("Import from %s failed: %s", raw_path, exc)
        print(f"Could not read {raw_path}.")
        return
    try:
        summary = service.import_characters(blob)
    except CorruptDataError as exc:
        print(f"Import failed: {exc}")
        return
    print(summary.message)
