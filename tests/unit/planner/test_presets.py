"""Unit tests for schedule presets."""

import pytest

from coursehub.catalog import parse_clock
from coursehub.planner import (
    FREE_PRESETS,
    InvalidPresetError,
    InvalidScheduleRequestError,
    PresetNotFoundError,
    PresetRegistry,
    SchedulePreset,
    UnknownPresetError,
)
from coursehub.planner.models import PreferenceParameters


@pytest.mark.unit
class TestPresetRegistry:
    """Tests for preset lookup."""

    def test_builtin_presets(self) -> None:
        registry = PresetRegistry()

        assert [p.id for p in registry.all()] == [
            "free-easy-professors",
            "free-late-start",
            "free-early-end",
        ]
        assert all(p.type == "free" for p in registry.all())

    def test_get(self) -> None:
        preset = PresetRegistry().get("free-late-start")

        assert preset.name == "Prioritize Late In"
        assert preset.parameters.prioritize_late_start == 100
        assert preset.parameters.preferred_start_time == parse_clock("11:00")

    def test_get_unknown(self) -> None:
        with pytest.raises(UnknownPresetError, match="nope"):
            PresetRegistry().get("nope")

    def test_unknown_is_a_request_error(self) -> None:
        assert issubclass(UnknownPresetError, InvalidScheduleRequestError)

    def test_custom_presets(self) -> None:
        custom = SchedulePreset(
            id="mine", name="Mine", parameters=PreferenceParameters(prioritize_early_end=10)
        )
        registry = PresetRegistry((custom,))

        assert registry.get("mine") is custom
        with pytest.raises(UnknownPresetError):
            registry.get(FREE_PRESETS[0].id)


@pytest.mark.unit
class TestCustomPresets:
    """Tests for user-owned presets."""

    @pytest.fixture
    def registry(self) -> PresetRegistry:
        return PresetRegistry()

    @pytest.fixture
    def params(self) -> PreferenceParameters:
        return PreferenceParameters(
            prioritize_early_end=80, preferred_end_time=parse_clock("13:00")
        )

    def test_create(self, registry: PresetRegistry, params: PreferenceParameters) -> None:
        preset = registry.create("alice", "  Done by lunch ", params)

        assert preset.id.startswith("preset-")
        assert preset.type == "custom"
        assert preset.user_id == "alice"
        assert preset.name == "Done by lunch"
        assert preset.parameters is params
        assert preset.created_at is not None
        assert registry.get(preset.id, user_id="alice") is preset

    def test_listed_only_for_owner(
        self, registry: PresetRegistry, params: PreferenceParameters
    ) -> None:
        preset = registry.create("alice", "Mine", params)

        assert [p.id for p in registry.all("alice")][-1] == preset.id
        assert len(registry.all("alice")) == len(FREE_PRESETS) + 1
        assert len(registry.all("bob")) == len(FREE_PRESETS)
        assert len(registry.all()) == len(FREE_PRESETS)

    def test_hidden_from_other_users(
        self, registry: PresetRegistry, params: PreferenceParameters
    ) -> None:
        preset = registry.create("alice", "Mine", params)

        with pytest.raises(UnknownPresetError):
            registry.get(preset.id, user_id="bob")
        with pytest.raises(UnknownPresetError):
            registry.get(preset.id)

    def test_free_presets_visible_to_everyone(self, registry: PresetRegistry) -> None:
        assert registry.get("free-early-end", user_id="bob").type == "free"

    @pytest.mark.parametrize("name", ["", "   ", "x" * 101])
    def test_invalid_name(
        self, registry: PresetRegistry, params: PreferenceParameters, name: str
    ) -> None:
        with pytest.raises(InvalidPresetError):
            registry.create("alice", name, params)

    def test_update(self, registry: PresetRegistry, params: PreferenceParameters) -> None:
        preset = registry.create("alice", "Mine", params)
        new_params = PreferenceParameters(prioritize_late_start=60)

        renamed = registry.update(preset.id, "alice", name="Renamed")
        reweighted = registry.update(preset.id, "alice", parameters=new_params)

        assert renamed.name == "Renamed"
        assert renamed.parameters is params
        assert reweighted.name == "Renamed"
        assert reweighted.parameters is new_params
        assert reweighted.created_at == preset.created_at
        assert registry.get(preset.id, user_id="alice") is reweighted

    def test_update_by_other_user(
        self, registry: PresetRegistry, params: PreferenceParameters
    ) -> None:
        preset = registry.create("alice", "Mine", params)

        with pytest.raises(PresetNotFoundError):
            registry.update(preset.id, "bob", name="Stolen")
        assert registry.get(preset.id, user_id="alice").name == "Mine"

    def test_delete(self, registry: PresetRegistry, params: PreferenceParameters) -> None:
        preset = registry.create("alice", "Mine", params)

        registry.delete(preset.id, "alice")

        with pytest.raises(UnknownPresetError):
            registry.get(preset.id, user_id="alice")
        with pytest.raises(PresetNotFoundError):
            registry.delete(preset.id, "alice")

    def test_delete_by_other_user(
        self, registry: PresetRegistry, params: PreferenceParameters
    ) -> None:
        preset = registry.create("alice", "Mine", params)

        with pytest.raises(PresetNotFoundError):
            registry.delete(preset.id, "bob")
        assert registry.get(preset.id, user_id="alice") is preset

    @pytest.mark.parametrize("preset_id", [p.id for p in FREE_PRESETS])
    def test_builtin_presets_are_read_only(
        self, registry: PresetRegistry, preset_id: str
    ) -> None:
        with pytest.raises(InvalidPresetError, match="built in"):
            registry.update(preset_id, "alice", name="Mine now")
        with pytest.raises(InvalidPresetError, match="built in"):
            registry.delete(preset_id, "alice")
