from pathlib import Path

import pytest

from mission_tracker.domain.progress_state import Character
from mission_tracker.presentation.cli.kv_store import JsonFileKeyValueStore
from mission_tracker.services import CorruptDataError, KeyValuePersistence


def test_get_missing_key_returns_none(tmp_path: Path) -> None:
    store = JsonFileKeyValueStore(tmp_path / "storage")
    assert store.get("characters") is None


def test_set_get_delete(tmp_path: Path) -> None:
    store = JsonFileKeyValueStore(tmp_path / "storage")
    store.set("activeCharacterId", "abc")
    assert (tmp_path / "storage" / "activeCharacterId.json").exists()
    assert store.get("activeCharacterId") == "abc"
    assert not list((tmp_path / "storage").glob("*.tmp"))
    store.delete("activeCharacterId")
    assert store.get("activeCharacterId") is None
    store.delete("activeCharacterId")


def test_invalid_key_rejected(tmp_path: Path) -> None:
    store = JsonFileKeyValueStore(tmp_path)
    with pytest.raises(ValueError):
        store.set("../escape", 1)


def test_persistence_over_file_store(tmp_path: Path) -> None:
    persistence = KeyValuePersistence(JsonFileKeyValueStore(tmp_path))
    character = Character(name="Ayame", server="Asura")
    persistence.save([character], character.id)
    reloaded = KeyValuePersistence(JsonFileKeyValueStore(tmp_path)).load()
    assert reloaded is not None
    assert reloaded.characters[0].id == character.id
    assert reloaded.active_id == character.id


def test_corrupt_file_surfaces_as_corrupt_data(tmp_path: Path) -> None:
    (tmp_path / "characters.json").write_text("{oops", encoding="utf-8")
    with pytest.raises(CorruptDataError):
        KeyValuePersistence(JsonFileKeyValueStore(tmp_path)).load()
