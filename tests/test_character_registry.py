import pytest

from mission_tracker.domain.progress_state import Character
from mission_tracker.services import (
    CharacterLimitReachedError,
    CharacterNotFoundError,
    CharacterRegistry,
    InvalidCharacterInputError,
)


def _registry_with(count: int, *, max_characters: int = 18) -> CharacterRegistry:
    registry = CharacterRegistry(max_characters=max_characters)
    for index in range(count):
        registry.add(f"Hero{index}", "Asura")
    return registry


def test_first_character_becomes_active() -> None:
    registry = CharacterRegistry()
    first = registry.add("Ayame", "Asura", "SAM")
    registry.add("Volker", "Bahamut")
    assert registry.active_id == first.id
    assert registry.active is first
    assert first.display_name == "Ayame (SAM)"


def test_add_trims_and_rejects_blank_input() -> None:
    registry = CharacterRegistry()
    character = registry.add("  Naji ", " Asura ", "  ")
    assert character.name == "Naji"
    assert character.server == "Asura"
    assert character.job is None
    with pytest.raises(InvalidCharacterInputError):
        registry.add("   ", "Asura")
    with pytest.raises(InvalidCharacterInputError):
        registry.add("Naji", "")


def test_capacity_enforced() -> None:
    registry = _registry_with(18)
    assert not registry.can_add
    with pytest.raises(CharacterLimitReachedError):
        registry.add("Overflow", "Asura")
    assert len(registry) == 18


def test_limit_checked_before_input() -> None:
    registry = _registry_with(1, max_characters=1)
    with pytest.raises(CharacterLimitReachedError):
        registry.add("", "")


def test_invalid_max_characters_rejected() -> None:
    with pytest.raises(ValueError):
        CharacterRegistry(max_characters=0)


def test_delete_active_falls_back_to_first_remaining() -> None:
    registry = _registry_with(3)
    first, second, third = registry.all()
    registry.set_active(second.id)
    registry.delete(second.id)
    assert registry.active_id == first.id
    registry.delete(first.id)
    assert registry.active_id == third.id
    registry.delete(third.id)
    assert registry.active_id is None
    assert registry.active is None


def test_delete_unknown_id_is_noop() -> None:
    registry = _registry_with(2)
    active_id = registry.active_id
    registry.delete("missing")
    assert len(registry) == 2
    assert registry.active_id == active_id


def test_set_active_and_get_unknown_raise() -> None:
    registry = _registry_with(1)
    with pytest.raises(CharacterNotFoundError):
        registry.set_active("missing")
    with pytest.raises(CharacterNotFoundError):
        registry.get("missing")


def test_update_replaces_by_id() -> None:
    registry = _registry_with(1)
    original = registry.all()[0]
    renamed = Character(name="Renamed", server=original.server, id=original.id)
    registry.update(renamed)
    assert registry.get(original.id).name == "Renamed"
    with pytest.raises(CharacterNotFoundError):
        registry.update(Character(name="Ghost", server="Asura"))


def test_import_merge_updates_adds_and_skips() -> None:
    registry = _registry_with(2, max_characters=3)
    existing = registry.all()[0]
    incoming = [
        Character(name="Updated", server="Asura", id=existing.id),
        Character(name="New One", server="Asura"),
        Character(name="No Room", server="Asura"),
    ]
    summary = registry.import_merge(incoming)
    assert (summary.added, summary.updated, summary.skipped) == (1, 1, 1)
    assert registry.get(existing.id).name == "Updated"
    assert len(registry) == 3
    assert summary.message == "Imported 1 new character(s) and updated 1 existing character(s)."


def test_import_merge_into_empty_registry_sets_active() -> None:
    registry = CharacterRegistry()
    character = Character(name="Imported", server="Asura")
    summary = registry.import_merge([character])
    assert registry.active_id == character.id
    assert summary.message == "Imported 1 character(s) successfully."


def test_import_summary_messages() -> None:
    registry = _registry_with(1, max_characters=1)
    summary = registry.import_merge([Character(name="Extra", server="Asura")])
    assert summary.message == "No characters were imported. You may have reached the character limit."


def test_restore_dedupes_truncates_and_validates_active() -> None:
    registry = CharacterRegistry(max_characters=2)
    first = Character(name="A", server="S")
    second = Character(name="B", server="S")
    third = Character(name="C", server="S")
    registry.restore([first, first, second, third], third.id)
    assert [character.id for character in registry.all()] == [first.id, second.id]
    assert registry.active_id == first.id


def test_restore_keeps_known_active_id() -> None:
    registry = CharacterRegistry()
    first = Character(name="A", server="S")
    second = Character(name="B", server="S")
    registry.restore([first, second], second.id)
    assert registry.active is second
