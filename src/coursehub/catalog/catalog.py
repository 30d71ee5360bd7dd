"""CourseCatalog - Read-only course and section lookup."""

from __future__ import annotations

import json
import logging
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from coursehub.catalog.exceptions import CatalogError, CatalogFormatError, CourseNotFoundError
from coursehub.catalog.models import Course, Day, MeetingTime, Section, parse_clock

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

SAMPLE_CATALOG = "sample_catalog.yaml"


class CourseCatalog:
    """In-memory course catalog.

    Courses keep the order they were given in; search results follow it.
    """

    def __init__(self, courses: Iterable[Course]) -> None:
        """Initialize the catalog.

        Args:
            courses: Courses to index. Codes must be unique.

        Raises:
            CatalogError: If two courses share a code.
        """
        self._courses: dict[str, Course] = {}
        for course in courses:
            if course.code in self._courses:
                raise CatalogError(f"Duplicate course code '{course.code}'")
            self._courses[course.code] = course

    def __len__(self) -> int:
        return len(self._courses)

    def __contains__(self, code: object) -> bool:
        return code in self._courses

    def all(self) -> list[Course]:
        """List all courses in catalog order."""
        return list(self._courses.values())

    def get_by_code(self, code: str) -> Course | None:
        """Get a course by its code, or None if unknown."""
        return self._courses.get(code)

    def require(self, code: str) -> Course:
        """Get a course by its code.

        Raises:
            CourseNotFoundError: If the course doesn't exist.
        """
        course = self._courses.get(code)
        if course is None:
            raise CourseNotFoundError(f"Course '{code}' not found")
        return course

    def get_section(self, code: str, section_id: str) -> Section | None:
        """Get the live record of one section, or None."""
        course = self._courses.get(code)
        if course is None:
            return None
        return course.get_section(section_id)

    def search(self, query: str) -> list[Course]:
        """Case-insensitive substring search over course code and name.

        A blank query returns every course.
        """
        needle = query.strip().lower()
        if not needle:
            return self.all()
        return [
            course
            for course in self._courses.values()
            if needle in course.code.lower() or needle in course.name.lower()
        ]


def _parse_section(data: dict[str, Any]) -> Section:
    meetings = tuple(
        MeetingTime(
            day=Day.parse(m["day"]),
            start=parse_clock(m["start"]),
            end=parse_clock(m["end"]),
        )
        for m in data.get("meeting_times", [])
    )
    return Section(
        id=str(data["id"]),
        section_number=str(data.get("section_number", data["id"])),
        professor=data.get("professor", "TBA"),
        meeting_times=meetings,
        capacity=int(data.get("capacity", 0)),
        enrolled=int(data.get("enrolled", 0)),
        professor_rating=data.get("professor_rating"),
        professor_difficulty=data.get("professor_difficulty"),
        is_online=bool(data.get("is_online", False)),
        is_hybrid=bool(data.get("is_hybrid", False)),
        location=data.get("location", ""),
    )


def _parse_course(data: dict[str, Any]) -> Course:
    return Course(
        code=data["code"],
        name=data["name"],
        credits=int(data.get("credits", 3)),
        department=data.get("department", ""),
        prerequisites=frozenset(data.get("prerequisites", [])),
        sections=tuple(_parse_section(s) for s in data.get("sections", [])),
        description=data.get("description"),
    )


def catalog_from_dict(data: dict[str, Any]) -> CourseCatalog:
    """Build a catalog from a parsed ``{"courses": [...]}`` mapping.

    Raises:
        CatalogFormatError: If a record is missing fields or has bad values.
    """
    records = data.get("courses")
    if not isinstance(records, list):
        raise CatalogFormatError("Catalog must contain a 'courses' list")

    courses = []
    for index, record in enumerate(records):
        try:
            courses.append(_parse_course(record))
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogFormatError(f"Invalid course record #{index}: {e}") from e
    return CourseCatalog(courses)


def load_catalog(path: Path | str | None = None) -> CourseCatalog:
    """Load a catalog from a YAML or JSON file.

    Args:
        path: Catalog file. None loads the sample catalog bundled with the package.

    Returns:
        The loaded catalog.

    Raises:
        CatalogFormatError: If the file is missing or malformed.
    """
    if path is None:
        bundled = resources.files("coursehub.catalog") / "data" / SAMPLE_CATALOG
        text = bundled.read_text(encoding="utf-8")
        source = SAMPLE_CATALOG
        is_json = False
    else:
        path = Path(path)
        if not path.exists():
            raise CatalogFormatError(f"Catalog file not found: {path}")
        text = path.read_text(encoding="utf-8")
        source = str(path)
        is_json = path.suffix.lower() == ".json"

    try:
        data = json.loads(text) if is_json else yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise CatalogFormatError(f"Invalid catalog file {source}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogFormatError(f"Catalog {source} must be a mapping")

    catalog = catalog_from_dict(data)
    logger.info("Loaded %d courses from %s", len(catalog), source)
    return catalog
