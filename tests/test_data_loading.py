import json
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from mission_tracker.data.catalog_loader import load_catalog, load_catalog_in_background
from mission_tracker.data.errors import CatalogMalformedError, CatalogNotFoundError
from mission_tracker.data.paths import CATALOG_DIR_ENV
from mission_tracker.data.repositories import (
    MissionSetFileRepository,
    MissionSetsRepository,
    RoeRepository,
    UnityNmRepository,
)
from mission_tracker.domain.defs import GateType


def _write_json(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


def _mission_set(set_id: str = "bastok", *, nodes: list | None = None) -> dict:
    return {
        "id": set_id,
        "name": "Bastok Missions",
        "category": "Nation",
        "missions": [
            {
                "id": f"{set_id}-1-1",
                "title": "The Zeruhn Report",
                "nodes": nodes
                if nodes is not None
                else [
                    {
                        "id": "b",
                        "orderIndex": 1,
                        "title": "Second",
                        "dependencies": ["a"],
                        "location": {"zone": "Zeruhn Mines"},
                    },
                    {"id": "a", "orderIndex": 0, "title": "First", "location": {"zone": "Bastok Mines"}},
                ],
                "gates": [
                    {"id": "g1", "type": "level", "requirement": "10", "description": "Level 10"},
                    {"id": "g2", "type": "fate", "requirement": "?", "description": "Unknown gate"},
                ],
            }
        ],
    }


def test_mission_set_parses_and_sorts_nodes(tmp_path: Path) -> None:
    _write_json(tmp_path / "bastok.json", _mission_set())
    mission_set = MissionSetFileRepository("bastok.json", tmp_path).load()
    mission = mission_set.missions[0]
    assert [node.id for node in mission.nodes] == ["a", "b"]
    assert mission.nodes[1].dependencies == frozenset({"a"})
    assert mission.nodes[0].description == ""
    assert [gate.type for gate in mission.gates] == [GateType.LEVEL, GateType.OTHER]
    assert mission.zones == ["Bastok Mines", "Zeruhn Mines"]
    assert mission_set.missions_in_zone("Zeruhn Mines") == [mission]
    assert [node.id for node in mission.dependent_nodes("a")] == ["b"]


def test_missing_order_index_is_malformed(tmp_path: Path) -> None:
    _write_json(tmp_path / "bad.json", _mission_set(nodes=[{"id": "a", "title": "First"}]))
    with pytest.raises(CatalogMalformedError) as excinfo:
        MissionSetFileRepository("bad.json", tmp_path).load()
    assert excinfo.value.filename == "bad.json"


def test_cross_mission_dependency_is_malformed(tmp_path: Path) -> None:
    nodes = [{"id": "a", "orderIndex": 0, "title": "First", "dependencies": ["elsewhere"]}]
    _write_json(tmp_path / "bad.json", _mission_set(nodes=nodes))
    with pytest.raises(CatalogMalformedError):
        MissionSetFileRepository("bad.json", tmp_path).load()


def test_invalid_json_and_missing_file(tmp_path: Path) -> None:
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogMalformedError):
        MissionSetFileRepository("broken.json", tmp_path).load()
    with pytest.raises(CatalogNotFoundError):
        MissionSetFileRepository("absent.json", tmp_path).load()


def test_batch_isolates_failing_files(tmp_path: Path) -> None:
    _write_json(tmp_path / "good.json", _mission_set("good"))
    (tmp_path / "broken.json").write_text("[", encoding="utf-8")
    repo = MissionSetsRepository(["good", "broken", "absent"], tmp_path)
    assert [mission_set.id for mission_set in repo.all()] == ["good"]
    assert len(repo.errors) == 2
    assert repo.get("good").name == "Bastok Missions"
    with pytest.raises(KeyError):
        repo.get("broken")


def test_roe_grouping_collects_unfiled_under_general(tmp_path: Path) -> None:
    _write_json(
        tmp_path / "roe-objectives.json",
        {
            "categories": [
                {"name": "Tutorial", "subcategories": ["Basics", "Empty"]},
                {"name": "Unused", "subcategories": []},
            ],
            "objectives": [
                {"name": "First Step Forward", "category": "Tutorial", "subcategory": "Basics"},
                {
                    "name": "Loose Objective",
                    "category": "Tutorial",
                    "rewards": {"sparks": 100, "items": [{"name": "Copper Voucher"}]},
                },
            ],
        },
    )
    catalog = RoeRepository(tmp_path).load()
    groups = catalog.group_objectives()
    assert [group.name for group in groups] == ["Tutorial"]
    assert [sub.name for sub in groups[0].subcategories] == ["Basics", "General"]
    assert groups[0].total_objectives == 2
    loose = groups[0].subcategories[1].objectives[0]
    assert loose.id == "Tutorial||Loose Objective"
    assert loose.has_rewards
    assert loose.rewards.items == ("Copper Voucher",)
    assert not catalog.objectives[0].has_rewards


def test_roe_repeatable_must_be_boolean(tmp_path: Path) -> None:
    _write_json(
        tmp_path / "roe-objectives.json",
        {"objectives": [{"name": "X", "category": "Y", "repeatable": "yes"}]},
    )
    with pytest.raises(CatalogMalformedError):
        RoeRepository(tmp_path).load()


def test_unity_nm_junction_forms_and_grouping(tmp_path: Path) -> None:
    _write_json(
        tmp_path / "unity-nms.json",
        {
            "unity_notorious_monsters": [
                {
                    "nm": "Zeta",
                    "level": 122,
                    "accolades": 200,
                    "zone": "Yorcia Weald",
                    "category": "Level 122",
                    "ethereal_junctions": [{"map": 1, "coords": ["E-7", "H-9"]}],
                },
                {
                    "nm": "Alpha",
                    "level": 99,
                    "accolades": 100,
                    "zone": "Bastok Markets",
                    "category": "Level 99",
                    "ethereal_junctions": ["F-10"],
                },
                {"nm": "Beta", "level": 95, "accolades": 50, "zone": "Jugner", "category": "Level 99"},
            ]
        },
    )
    catalog = UnityNmRepository(tmp_path).load()
    assert catalog.categories == ("Level 122", "Level 99")
    zeta, alpha, _ = catalog.nms
    assert zeta.id == "Zeta"
    assert zeta.ethereal_junctions.display == "Map 1: E-7, H-9"
    assert alpha.ethereal_junctions.coords == ("F-10",)
    groups = {group.name: group for group in catalog.group_by_category()}
    assert [nm.nm for nm in groups["Level 99"].nms] == ["Beta", "Alpha"]
    assert groups["Level 99"].level_range == "Lv. 95-99"
    assert groups["Level 99"].accolade_range == "50-100"
    assert groups["Level 122"].level_range == "Lv. 122"


def test_load_catalog_collects_errors(tmp_path: Path) -> None:
    _write_json(tmp_path / "good.json", _mission_set("good"))
    catalog = load_catalog(tmp_path, mission_files=["good", "absent"], quest_files=[])
    assert [mission_set.id for mission_set in catalog.mission_sets] == ["good"]
    assert catalog.quest_sets == ()
    assert catalog.roe is None
    assert catalog.unity_nms is None
    # missing mission file, ROE file and Unity NM file
    assert len(catalog.errors) == 3
    assert [mission.id for mission in catalog.iter_missions()] == ["good-1-1"]


def test_background_loader_returns_catalog(tmp_path: Path) -> None:
    _write_json(tmp_path / "good.json", _mission_set("good"))
    future = load_catalog_in_background(
        tmp_path, mission_files=["good"], quest_files=[], include_roe=False, include_unity_nms=False
    )
    catalog = future.result(timeout=5)
    assert catalog.errors == ()
    with ThreadPoolExecutor(max_workers=1) as executor:
        shared = load_catalog_in_background(
            tmp_path, executor=executor, mission_files=["good"], quest_files=[], include_roe=False
        )
        assert len(shared.result(timeout=5).errors) == 1


def test_bundled_sample_catalog_loads(monkeypatch) -> None:
    monkeypatch.delenv(CATALOG_DIR_ENV, raising=False)
    catalog = load_catalog(mission_files=["ffxiclopedia-bastok"], quest_files=["ffxiclopedia-bastok-quests"])
    assert catalog.errors == ()
    assert catalog.roe is not None
    assert catalog.unity_nms is not None
    assert len(list(catalog.iter_missions())) == 2
