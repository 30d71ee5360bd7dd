"""Custom exceptions for the schedule planner."""


class PlannerError(Exception):
    """Base exception for schedule planner errors."""


class InvalidScheduleRequestError(PlannerError):
    """Schedule request is empty or its parameters are invalid."""


class UnknownPresetError(InvalidScheduleRequestError):
    """Preset with given ID does not exist."""


class ProposerError(PlannerError):
    """Schedule proposer failed or returned malformed output."""


class InvalidPresetError(InvalidScheduleRequestError):
    """Preset name is invalid or the preset cannot be changed."""


class PresetNotFoundError(PlannerError):
    """Custom preset does not exist or belongs to another user."""
