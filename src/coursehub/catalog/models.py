"""Data models for the Course Catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

MINUTES_PER_DAY = 24 * 60


class Day(StrEnum):
    """Day of the week a class meets."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def parse(cls, value: str | Day) -> Day:
        """Parse a full or abbreviated day name (case-insensitive).

        Raises:
            ValueError: If the value is not a recognizable day.
        """
        if isinstance(value, Day):
            return value
        key = value.strip().lower()
        day = _DAY_ALIASES.get(key)
        if day is None:
            raise ValueError(f"Unknown day: {value!r}")
        return day


_DAY_ALIASES: dict[str, Day] = {}
for _day in Day:
    _name = _day.value.lower()
    _DAY_ALIASES[_name] = _day
    _DAY_ALIASES[_name[:3]] = _day
_DAY_ALIASES.update(
    {
        "tues": Day.TUESDAY,
        "thur": Day.THURSDAY,
        "thurs": Day.THURSDAY,
    }
)


def parse_clock(value: str) -> int:
    """Convert an "HH:MM" clock string to minutes since midnight.

    Raises:
        ValueError: If the string is not a valid 24-hour time.
    """
    try:
        hours_str, minutes_str = value.strip().split(":")
        hours, minutes = int(hours_str), int(minutes_str)
    except (AttributeError, ValueError) as e:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM") from e
    if not (0 <= hours <= 24 and 0 <= minutes < 60) or hours * 60 + minutes > MINUTES_PER_DAY:
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    """Convert minutes since midnight to an "HH:MM" string."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


@dataclass(frozen=True)
class MeetingTime:
    """One weekly meeting of a section, as a half-open minute interval."""

    day: Day
    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start < self.end <= MINUTES_PER_DAY:
            raise ValueError(
                f"Invalid meeting interval {self.start}-{self.end} on {self.day}"
            )

    def overlaps(self, other: MeetingTime) -> bool:
        """Whether two meetings share the same day and any minute.

        Back-to-back meetings (one ends when the other starts) do not overlap.
        """
        return self.day == other.day and self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"{self.day.value} {format_clock(self.start)}-{format_clock(self.end)}"


@dataclass(frozen=True)
class Section:
    """One offered instance of a course."""

    id: str
    section_number: str
    professor: str
    meeting_times: tuple[MeetingTime, ...] = ()
    capacity: int = 0
    enrolled: int = 0
    professor_rating: float | None = None
    professor_difficulty: float | None = None
    is_online: bool = False
    is_hybrid: bool = False
    location: str = ""

    def __post_init__(self) -> None:
        if self.capacity < 0 or self.enrolled < 0:
            raise ValueError(f"Section {self.id}: capacity and enrolled must be >= 0")
        for label, value in (
            ("professor_rating", self.professor_rating),
            ("professor_difficulty", self.professor_difficulty),
        ):
            if value is not None and not 0.0 <= value <= 5.0:
                raise ValueError(f"Section {self.id}: {label} must be between 0 and 5")

    @property
    def is_full(self) -> bool:
        """A full section is never available for selection."""
        return self.enrolled >= self.capacity

    @property
    def seats_available(self) -> int:
        return max(0, self.capacity - self.enrolled)


@dataclass(frozen=True)
class Course:
    """A catalog course with its prerequisites and offered sections."""

    code: str
    name: str
    credits: int
    department: str = ""
    prerequisites: frozenset[str] = field(default_factory=frozenset)
    sections: tuple[Section, ...] = ()
    description: str | None = None

    def __post_init__(self) -> None:
        if self.credits <= 0:
            raise ValueError(f"Course {self.code}: credits must be positive")
        if self.code in self.prerequisites:
            raise ValueError(f"Course {self.code} cannot be its own prerequisite")
        seen: set[str] = set()
        for section in self.sections:
            if section.id in seen:
                raise ValueError(f"Course {self.code}: duplicate section id {section.id!r}")
            seen.add(section.id)

    def get_section(self, section_id: str) -> Section | None:
        """Get a section by ID, or None."""
        for section in self.sections:
            if section.id == section_id:
                return section
        return None

    @property
    def available_sections(self) -> list[Section]:
        """Sections with at least one open seat, in catalog order."""
        return [s for s in self.sections if not s.is_full]
