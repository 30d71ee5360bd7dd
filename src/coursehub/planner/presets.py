"""Built-in and user-owned schedule presets."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from coursehub.catalog import parse_clock
from coursehub.planner.exceptions import (
    InvalidPresetError,
    PresetNotFoundError,
    UnknownPresetError,
)
from coursehub.planner.models import (
    ClassSizePreference,
    GapPreference,
    OnlinePreference,
    PreferenceParameters,
    generate_id,
)

logger = logging.getLogger(__name__)

FREE = "free"
CUSTOM = "custom"
MAX_NAME_LENGTH = 100


@dataclass(frozen=True)
class SchedulePreset:
    """A named set of preferences.

    Free presets are shared by everyone; custom presets belong to user_id.
    """

    id: str
    name: str
    parameters: PreferenceParameters
    type: str = FREE
    user_id: str | None = None
    created_at: datetime | None = None

    def visible_to(self, user_id: str | None) -> bool:
        return self.type == FREE or (user_id is not None and self.user_id == user_id)


FREE_PRESETS: tuple[SchedulePreset, ...] = (
    SchedulePreset(
        id="free-easy-professors",
        name="Prioritize Easy Professors",
        parameters=PreferenceParameters(
            prioritize_easy_professors=100,
            gap_preference=GapPreference.BALANCED,
            class_size_preference=ClassSizePreference.ANY,
            online_preference=OnlinePreference.ANY,
        ),
    ),
    SchedulePreset(
        id="free-late-start",
        name="Prioritize Late In",
        parameters=PreferenceParameters(
            prioritize_late_start=100,
            preferred_start_time=parse_clock("11:00"),
            gap_preference=GapPreference.BALANCED,
            class_size_preference=ClassSizePreference.ANY,
            online_preference=OnlinePreference.ANY,
        ),
    ),
    SchedulePreset(
        id="free-early-end",
        name="Prioritize Early Out",
        parameters=PreferenceParameters(
            prioritize_early_end=100,
            preferred_end_time=parse_clock("14:00"),
            gap_preference=GapPreference.BALANCED,
            class_size_preference=ClassSizePreference.ANY,
            online_preference=OnlinePreference.ANY,
        ),
    ),
)


class PresetRegistry:
    """Lookup of presets by ID, plus per-user custom presets.

    Built-in presets are read-only. Custom presets are kept in memory and are
    only visible to, and editable by, their owner.
    """

    def __init__(self, presets: tuple[SchedulePreset, ...] = FREE_PRESETS) -> None:
        self._presets = {preset.id: preset for preset in presets}
        self._custom: dict[str, SchedulePreset] = {}
        self._lock = threading.Lock()

    def all(self, user_id: str | None = None) -> list[SchedulePreset]:
        """List built-in presets followed by the user's custom presets."""
        with self._lock:
            custom = [p for p in self._custom.values() if p.visible_to(user_id)]
        return [*self._presets.values(), *custom]

    def get(self, preset_id: str, user_id: str | None = None) -> SchedulePreset:
        """Get a preset by ID.

        Args:
            preset_id: Built-in or custom preset ID.
            user_id: Caller; custom presets resolve only for their owner.

        Raises:
            UnknownPresetError: If no preset visible to the user has this ID.
        """
        preset = self._presets.get(preset_id)
        if preset is None:
            with self._lock:
                preset = self._custom.get(preset_id)
        if preset is None or not preset.visible_to(user_id):
            raise UnknownPresetError(f"Preset '{preset_id}' not found")
        return preset

    def create(
        self, user_id: str, name: str, parameters: PreferenceParameters
    ) -> SchedulePreset:
        """Save a new custom preset owned by user_id.

        Raises:
            InvalidPresetError: If the name is blank or too long.
        """
        preset = SchedulePreset(
            id=generate_id("preset"),
            name=_clean_name(name),
            parameters=parameters,
            type=CUSTOM,
            user_id=user_id,
            created_at=datetime.now(UTC),
        )
        with self._lock:
            self._custom[preset.id] = preset
        logger.info("User %s created preset %s", user_id, preset.id)
        return preset

    def update(
        self,
        preset_id: str,
        user_id: str,
        name: str | None = None,
        parameters: PreferenceParameters | None = None,
    ) -> SchedulePreset:
        """Rename a custom preset and/or replace its parameters.

        Raises:
            InvalidPresetError: If the preset is built-in or the name is invalid.
            PresetNotFoundError: If the user owns no preset with this ID.
        """
        changes: dict[str, object] = {}
        if name is not None:
            changes["name"] = _clean_name(name)
        if parameters is not None:
            changes["parameters"] = parameters

        with self._lock:
            preset = self._owned(preset_id, user_id)
            updated = replace(preset, **changes)
            self._custom[preset_id] = updated
        logger.info("User %s updated preset %s", user_id, preset_id)
        return updated

    def delete(self, preset_id: str, user_id: str) -> None:
        """Delete a custom preset.

        Raises:
            InvalidPresetError: If the preset is built-in.
            PresetNotFoundError: If the user owns no preset with this ID.
        """
        with self._lock:
            self._owned(preset_id, user_id)
            del self._custom[preset_id]
        logger.info("User %s deleted preset %s", user_id, preset_id)

    def _owned(self, preset_id: str, user_id: str) -> SchedulePreset:
        if preset_id in self._presets:
            raise InvalidPresetError(f"Preset '{preset_id}' is built in and cannot be changed")
        preset = self._custom.get(preset_id)
        if preset is None or preset.user_id != user_id:
            raise PresetNotFoundError(f"Preset '{preset_id}' not found")
        return preset


def _clean_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise InvalidPresetError("Preset name is required")
    if len(cleaned) > MAX_NAME_LENGTH:
        raise InvalidPresetError(f"Preset name must be at most {MAX_NAME_LENGTH} characters")
    return cleaned
