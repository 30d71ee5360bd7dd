"""Shared pytest fixtures and configuration."""

import pytest

from coursehub.catalog import Course, CourseCatalog, Day, MeetingTime, Section, parse_clock
from coursehub.planner import SelectedSection


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


def _meet(day: Day, start: str, end: str) -> MeetingTime:
    return MeetingTime(day=day, start=parse_clock(start), end=parse_clock(end))


@pytest.fixture
def small_catalog() -> CourseCatalog:
    """Three-course catalog: CS1, CS2 (requires CS1) and MATH1.

    cs1-a (MWF 09:00-09:50) overlaps cs2-a (MWF 09:30-10:20);
    cs2-b (MWF 09:50-10:40) is back-to-back with cs1-a;
    math1-a is full; math1-b overlaps cs1-b (TR 13:00-14:15).
    """
    mwf = (Day.MONDAY, Day.WEDNESDAY, Day.FRIDAY)
    tr = (Day.TUESDAY, Day.THURSDAY)
    return CourseCatalog(
        [
            Course(
                code="CS1",
                name="Intro to Programming",
                credits=3,
                sections=(
                    Section(
                        id="cs1-a",
                        section_number="001",
                        professor="Dr. Ada",
                        meeting_times=tuple(_meet(d, "09:00", "09:50") for d in mwf),
                        capacity=30,
                        enrolled=10,
                        professor_rating=4.0,
                        professor_difficulty=2.0,
                    ),
                    Section(
                        id="cs1-b",
                        section_number="002",
                        professor="Dr. Byron",
                        meeting_times=tuple(_meet(d, "13:00", "14:15") for d in tr),
                        capacity=30,
                        enrolled=5,
                        professor_rating=3.0,
                        professor_difficulty=4.0,
                    ),
                ),
            ),
            Course(
                code="CS2",
                name="Data Structures",
                credits=3,
                prerequisites=frozenset({"CS1"}),
                sections=(
                    Section(
                        id="cs2-a",
                        section_number="001",
                        professor="Dr. Church",
                        meeting_times=tuple(_meet(d, "09:30", "10:20") for d in mwf),
                        capacity=40,
                        enrolled=39,
                    ),
                    Section(
                        id="cs2-b",
                        section_number="002",
                        professor="Dr. Dijkstra",
                        meeting_times=tuple(_meet(d, "09:50", "10:40") for d in mwf),
                        capacity=40,
                        enrolled=20,
                    ),
                ),
            ),
            Course(
                code="MATH1",
                name="Calculus I",
                credits=4,
                sections=(
                    Section(
                        id="math1-a",
                        section_number="001",
                        professor="Dr. Euler",
                        meeting_times=tuple(_meet(d, "11:00", "11:50") for d in mwf),
                        capacity=25,
                        enrolled=25,
                    ),
                    Section(
                        id="math1-b",
                        section_number="002",
                        professor="Dr. Fermat",
                        meeting_times=tuple(_meet(d, "13:30", "14:20") for d in tr),
                        capacity=25,
                        enrolled=3,
                    ),
                ),
            ),
        ]
    )


@pytest.fixture
def selected_sections() -> tuple[SelectedSection, ...]:
    """Two sections as they appear on a generated schedule."""
    return (
        SelectedSection(
            course_code="CS1",
            course_name="Intro to Programming",
            section_id="cs1-a",
            section_number="001",
            professor="Dr. Ada",
            meeting_times=(_meet(Day.MONDAY, "09:00", "09:50"),),
            credits=3,
        ),
        SelectedSection(
            course_code="MATH1",
            course_name="Calculus I",
            section_id="math1-b",
            section_number="002",
            professor="Dr. Fermat",
            meeting_times=(_meet(Day.TUESDAY, "13:30", "14:20"),),
            credits=4,
        ),
    )
