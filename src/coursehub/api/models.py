"""Pydantic models for REST API."""

from datetime import datetime
from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field, field_validator

from coursehub.catalog import Course, Day, MeetingTime, Section, format_clock, parse_clock
from coursehub.planner import (
    ClassSizePreference,
    Conflict,
    GapPreference,
    GeneratedSchedule,
    OnlinePreference,
    PreferenceParameters,
    SchedulePreset,
    SelectedSection,
)
from coursehub.registration import RegistrationIntent, TickResult

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Catalog models


class MeetingTimeResponse(BaseModel):
    """Response model for one weekly meeting."""

    day: str
    start_time: str
    end_time: str


class SectionResponse(BaseModel):
    """Response model for a course section."""

    id: str
    section_number: str
    professor: str
    meeting_times: list[MeetingTimeResponse]
    capacity: int
    enrolled: int
    seats_available: int
    is_full: bool
    professor_rating: float | None
    professor_difficulty: float | None
    is_online: bool
    is_hybrid: bool
    location: str


class CourseResponse(BaseModel):
    """Response model for a course."""

    code: str
    name: str
    credits: int
    department: str
    description: str | None
    prerequisites: list[str]
    sections: list[SectionResponse]


def meeting_to_response(meeting: MeetingTime) -> MeetingTimeResponse:
    return MeetingTimeResponse(
        day=meeting.day.value,
        start_time=format_clock(meeting.start),
        end_time=format_clock(meeting.end),
    )


def section_to_response(section: Section) -> SectionResponse:
    """Convert a catalog Section to SectionResponse."""
    return SectionResponse(
        id=section.id,
        section_number=section.section_number,
        professor=section.professor,
        meeting_times=[meeting_to_response(m) for m in section.meeting_times],
        capacity=section.capacity,
        enrolled=section.enrolled,
        seats_available=section.seats_available,
        is_full=section.is_full,
        professor_rating=section.professor_rating,
        professor_difficulty=section.professor_difficulty,
        is_online=section.is_online,
        is_hybrid=section.is_hybrid,
        location=section.location,
    )


def course_to_response(course: Course) -> CourseResponse:
    """Convert a catalog Course to CourseResponse."""
    return CourseResponse(
        code=course.code,
        name=course.name,
        credits=course.credits,
        department=course.department,
        description=course.description,
        prerequisites=sorted(course.prerequisites),
        sections=[section_to_response(s) for s in course.sections],
    )


# Preset and preference models


class PreferencesRequest(BaseModel):
    """Request model for weighted schedule preferences."""

    prioritize_easy_professors: float | None = Field(default=None, ge=0, le=100)
    prioritize_late_start: float | None = Field(default=None, ge=0, le=100)
    prioritize_early_end: float | None = Field(default=None, ge=0, le=100)
    preferred_start_time: str | None = None
    preferred_end_time: str | None = None
    avoid_days: list[str] = Field(default_factory=list)
    gap_preference: GapPreference | None = None
    class_size_preference: ClassSizePreference | None = None
    online_preference: OnlinePreference | None = None

    @field_validator("preferred_start_time", "preferred_end_time")
    @classmethod
    def check_clock(cls, value: str | None) -> str | None:
        if value is not None:
            parse_clock(value)
        return value

    @field_validator("avoid_days")
    @classmethod
    def check_days(cls, value: list[str]) -> list[str]:
        return [Day.parse(day).value for day in value]

    def to_parameters(self) -> PreferenceParameters:
        """Convert to planner PreferenceParameters."""
        return PreferenceParameters(
            prioritize_easy_professors=self.prioritize_easy_professors,
            prioritize_late_start=self.prioritize_late_start,
            prioritize_early_end=self.prioritize_early_end,
            preferred_start_time=(
                parse_clock(self.preferred_start_time)
                if self.preferred_start_time is not None
                else None
            ),
            preferred_end_time=(
                parse_clock(self.preferred_end_time)
                if self.preferred_end_time is not None
                else None
            ),
            avoid_days=frozenset(Day.parse(day) for day in self.avoid_days),
            gap_preference=self.gap_preference,
            class_size_preference=self.class_size_preference,
            online_preference=self.online_preference,
        )


class PreferencesResponse(BaseModel):
    """Response model for preference parameters."""

    prioritize_easy_professors: float | None
    prioritize_late_start: float | None
    prioritize_early_end: float | None
    preferred_start_time: str | None
    preferred_end_time: str | None
    avoid_days: list[str]
    gap_preference: str | None
    class_size_preference: str | None
    online_preference: str | None


class CreatePresetRequest(BaseModel):
    """Request model for saving a custom preset."""

    name: str = Field(..., min_length=1, max_length=100)
    parameters: PreferencesRequest


class UpdatePresetRequest(BaseModel):
    """Request model for editing a custom preset. Omitted fields are kept."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    parameters: PreferencesRequest | None = None


class PresetResponse(BaseModel):
    """Response model for a schedule preset."""

    id: str
    name: str
    type: str
    parameters: PreferencesResponse
    user_id: str | None = None
    created_at: datetime | None = None


def _value(member: StrEnum | None) -> str | None:
    return member.value if member is not None else None


def preferences_to_response(params: PreferenceParameters) -> PreferencesResponse:
    return PreferencesResponse(
        prioritize_easy_professors=params.prioritize_easy_professors,
        prioritize_late_start=params.prioritize_late_start,
        prioritize_early_end=params.prioritize_early_end,
        preferred_start_time=(
            format_clock(params.preferred_start_time)
            if params.preferred_start_time is not None
            else None
        ),
        preferred_end_time=(
            format_clock(params.preferred_end_time)
            if params.preferred_end_time is not None
            else None
        ),
        avoid_days=sorted(day.value for day in params.avoid_days),
        gap_preference=_value(params.gap_preference),
        class_size_preference=_value(params.class_size_preference),
        online_preference=_value(params.online_preference),
    )


def preset_to_response(preset: SchedulePreset) -> PresetResponse:
    """Convert a SchedulePreset to PresetResponse."""
    return PresetResponse(
        id=preset.id,
        name=preset.name,
        type=preset.type,
        parameters=preferences_to_response(preset.parameters),
        user_id=preset.user_id,
        created_at=preset.created_at,
    )


# Schedule models


class GenerateScheduleRequest(BaseModel):
    """Request model for generating a schedule."""

    courses: list[str]
    preferences: PreferencesRequest | None = None
    preset_id: str | None = None
    semester: str | None = Field(default=None, max_length=64)


class SelectedSectionResponse(BaseModel):
    """Response model for a section chosen in a schedule."""

    course_code: str
    course_name: str
    section_id: str
    section_number: str
    professor: str
    credits: int
    meeting_times: list[MeetingTimeResponse]


class ConflictResponse(BaseModel):
    """Response model for a schedule conflict."""

    kind: str
    message: str
    affected_courses: list[str]


class ScheduleResponse(BaseModel):
    """Response model for a generated schedule."""

    id: str
    user_id: str | None
    sections: list[SelectedSectionResponse]
    conflicts: list[ConflictResponse]
    score: int
    total_credits: int
    used_fallback: bool
    generated_at: datetime


def selected_to_response(section: SelectedSection) -> SelectedSectionResponse:
    return SelectedSectionResponse(
        course_code=section.course_code,
        course_name=section.course_name,
        section_id=section.section_id,
        section_number=section.section_number,
        professor=section.professor,
        credits=section.credits,
        meeting_times=[meeting_to_response(m) for m in section.meeting_times],
    )


def conflict_to_response(conflict: Conflict) -> ConflictResponse:
    return ConflictResponse(
        kind=conflict.kind.value,
        message=conflict.message,
        affected_courses=list(conflict.affected_courses),
    )


def schedule_to_response(schedule: GeneratedSchedule) -> ScheduleResponse:
    """Convert a GeneratedSchedule to ScheduleResponse."""
    return ScheduleResponse(
        id=schedule.id,
        user_id=schedule.user_id,
        sections=[selected_to_response(s) for s in schedule.sections],
        conflicts=[conflict_to_response(c) for c in schedule.conflicts],
        score=schedule.score,
        total_credits=schedule.total_credits,
        used_fallback=schedule.used_fallback,
        generated_at=schedule.generated_at,
    )


# Registration queue models


class SectionRef(BaseModel):
    """A course section picked for registration."""

    course_code: str = Field(..., min_length=1)
    section_id: str = Field(..., min_length=1)


class EnqueueRequest(BaseModel):
    """Request model for adding a schedule to the registration queue."""

    schedule_id: str = Field(..., max_length=128)
    sections: list[SectionRef]
    registration_date: datetime


class IntentResponse(BaseModel):
    """Response model for a registration intent."""

    id: str
    user_id: str
    schedule_id: str
    sections: list[SelectedSectionResponse]
    target_instant: datetime
    status: str
    attempts: int
    last_attempt_at: datetime | None
    last_error: str | None
    created_at: datetime


def intent_to_response(intent: RegistrationIntent) -> IntentResponse:
    """Convert a RegistrationIntent to IntentResponse."""
    return IntentResponse(
        id=intent.id,
        user_id=intent.user_id,
        schedule_id=intent.schedule_id,
        sections=[selected_to_response(s) for s in intent.sections],
        target_instant=intent.target_instant,
        status=intent.status.value,
        attempts=intent.attempts,
        last_attempt_at=intent.last_attempt_at,
        last_error=intent.last_error,
        created_at=intent.created_at,
    )


class TickResponse(BaseModel):
    """Response model for one registration queue sweep."""

    promoted: int
    attempted: int
    succeeded: int
    retried: int
    failed: int
    skipped: int
    errors: int


def tick_to_response(result: TickResult) -> TickResponse:
    return TickResponse(
        promoted=result.promoted,
        attempted=result.attempted,
        succeeded=result.succeeded,
        retried=result.retried,
        failed=result.failed,
        skipped=result.skipped,
        errors=result.errors,
    )


# Gateway models


class GatewayConnectRequest(BaseModel):
    """Request model for connecting to the registration system."""

    username: str = ""
    password: str = ""


class GatewayStatusResponse(BaseModel):
    """Response model for registration system connection status."""

    connected: bool
    message: str | None = None
