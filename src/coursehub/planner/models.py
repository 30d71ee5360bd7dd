"""Data models for schedule planning."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from coursehub.planner.exceptions import InvalidScheduleRequestError

if TYPE_CHECKING:
    from coursehub.catalog import Course, Day, MeetingTime, Section


class GapPreference(StrEnum):
    """How idle time between classes on the same day should be treated."""

    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"
    BALANCED = "balanced"


class ClassSizePreference(StrEnum):
    """Preferred section size."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    ANY = "any"


class OnlinePreference(StrEnum):
    """Preferred delivery format."""

    ONLINE = "online"
    IN_PERSON = "in-person"
    HYBRID = "hybrid"
    ANY = "any"


class ConflictKind(StrEnum):
    """Kinds of schedule conflicts."""

    PREREQUISITE = "prerequisite"
    TIME = "time"
    CAPACITY = "capacity"


def _now() -> datetime:
    return datetime.now(UTC)


def generate_id(prefix: str) -> str:
    """Generate a prefixed unique ID string."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class PreferenceParameters:
    """Weighted schedule preferences.

    Weights range 0-100. Every field is optional; absent fields do not
    contribute to scoring.

    Attributes:
        prioritize_easy_professors: Weight for low professor difficulty.
        prioritize_late_start: Weight for starting the day late.
        prioritize_early_end: Weight for finishing the day early.
        preferred_start_time: Earliest comfortable start, minutes since midnight.
        preferred_end_time: Latest comfortable end, minutes since midnight.
        avoid_days: Days with no classes wanted.
        gap_preference: Treatment of idle time between classes.
        class_size_preference: Preferred section size.
        online_preference: Preferred delivery format.
    """

    prioritize_easy_professors: float | None = None
    prioritize_late_start: float | None = None
    prioritize_early_end: float | None = None
    preferred_start_time: int | None = None
    preferred_end_time: int | None = None
    avoid_days: frozenset[Day] = field(default_factory=frozenset)
    gap_preference: GapPreference | None = None
    class_size_preference: ClassSizePreference | None = None
    online_preference: OnlinePreference | None = None

    def __post_init__(self) -> None:
        for name in (
            "prioritize_easy_professors",
            "prioritize_late_start",
            "prioritize_early_end",
        ):
            value = getattr(self, name)
            if value is not None and not 0 <= value <= 100:
                raise InvalidScheduleRequestError(f"{name} must be between 0 and 100")
        for name in ("preferred_start_time", "preferred_end_time"):
            value = getattr(self, name)
            if value is not None and not 0 <= value <= 24 * 60:
                raise InvalidScheduleRequestError(f"{name} must be a time of day")

    @classmethod
    def defaults(cls) -> PreferenceParameters:
        """Parameters used when a request names neither preferences nor a preset."""
        return cls(
            prioritize_easy_professors=50,
            prioritize_late_start=50,
            prioritize_early_end=50,
            gap_preference=GapPreference.BALANCED,
            class_size_preference=ClassSizePreference.ANY,
            online_preference=OnlinePreference.ANY,
        )


@dataclass(frozen=True)
class SelectedSection:
    """Immutable projection of the section chosen for one course."""

    course_code: str
    course_name: str
    section_id: str
    section_number: str
    professor: str
    meeting_times: tuple[MeetingTime, ...]
    credits: int

    @classmethod
    def from_section(cls, course: Course, section: Section) -> SelectedSection:
        """Project a catalog course/section pair."""
        return cls(
            course_code=course.code,
            course_name=course.name,
            section_id=section.id,
            section_number=section.section_number,
            professor=section.professor,
            meeting_times=tuple(section.meeting_times),
            credits=course.credits,
        )


@dataclass(frozen=True)
class Conflict:
    """A non-fatal warning attached to a generated schedule."""

    kind: ConflictKind
    message: str
    affected_courses: tuple[str, ...]

    @property
    def key(self) -> tuple[ConflictKind, tuple[str, ...]]:
        """Order-independent identity used to compare conflict lists."""
        return (self.kind, tuple(sorted(self.affected_courses)))


@dataclass(frozen=True)
class ScheduleRequest:
    """A request to generate a schedule.

    Attributes:
        courses: Required course codes (duplicates allowed).
        preferences: Explicit preferences; take precedence over preset_id.
        preset_id: Named preset to take preferences from.
        user_id: Requesting user, recorded on the result.
        semester: Informational semester label.
    """

    courses: tuple[str, ...]
    preferences: PreferenceParameters | None = None
    preset_id: str | None = None
    user_id: str | None = None
    semester: str | None = None


@dataclass(frozen=True)
class GeneratedSchedule:
    """Result of one generation request. Never mutated after creation."""

    sections: tuple[SelectedSection, ...]
    conflicts: tuple[Conflict, ...]
    score: int
    id: str = field(default_factory=lambda: generate_id("schedule"))
    user_id: str | None = None
    used_fallback: bool = False
    generated_at: datetime = field(default_factory=_now)

    @property
    def total_credits(self) -> int:
        return sum(s.credits for s in self.sections)

    @property
    def course_codes(self) -> list[str]:
        return [s.course_code for s in self.sections]


@dataclass(frozen=True)
class ProposedSection:
    """A proposer's pick: one section ID for one course code."""

    course_code: str
    section_id: str


@dataclass
class ProposerResult:
    """Output of a schedule proposer.

    Attributes:
        sections: One pick per course, in proposal order.
        score: Raw optimization score; clamped by the assembler.
    """

    sections: list[ProposedSection]
    score: float
