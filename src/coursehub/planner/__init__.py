"""Schedule planner - Prerequisites, section selection, scoring and conflicts."""

from coursehub.planner.assembler import ScheduleAssembler, first_available_selection
from coursehub.planner.conflicts import ConflictDetector, sections_overlap
from coursehub.planner.exceptions import (
    InvalidPresetError,
    InvalidScheduleRequestError,
    PlannerError,
    PresetNotFoundError,
    ProposerError,
    UnknownPresetError,
)
from coursehub.planner.models import (
    ClassSizePreference,
    Conflict,
    ConflictKind,
    GapPreference,
    GeneratedSchedule,
    OnlinePreference,
    PreferenceParameters,
    ProposedSection,
    ProposerResult,
    ScheduleRequest,
    SelectedSection,
    generate_id,
)
from coursehub.planner.presets import FREE_PRESETS, PresetRegistry, SchedulePreset
from coursehub.planner.proposer import HttpScheduleProposer, PreferenceProposer, ScheduleProposer
from coursehub.planner.resolver import PrerequisiteResolver

__all__ = [
    "FREE_PRESETS",
    "ClassSizePreference",
    "Conflict",
    "ConflictDetector",
    "ConflictKind",
    "GapPreference",
    "GeneratedSchedule",
    "HttpScheduleProposer",
    "InvalidPresetError",
    "InvalidScheduleRequestError",
    "OnlinePreference",
    "PlannerError",
    "PreferenceParameters",
    "PreferenceProposer",
    "PrerequisiteResolver",
    "PresetNotFoundError",
    "PresetRegistry",
    "ProposedSection",
    "ProposerError",
    "ProposerResult",
    "ScheduleAssembler",
    "SchedulePreset",
    "ScheduleProposer",
    "ScheduleRequest",
    "SelectedSection",
    "UnknownPresetError",
    "first_available_selection",
    "generate_id",
    "sections_overlap",
]
