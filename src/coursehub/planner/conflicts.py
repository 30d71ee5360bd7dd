"""Conflict Detector - Time overlaps and capacity violations."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from coursehub.planner.models import Conflict, ConflictKind, SelectedSection

if TYPE_CHECKING:
    from collections.abc import Sequence

    from coursehub.catalog import MeetingTime, Section

# (course_code, section_id) -> live section record
SectionLookup = Callable[[str, str], "Section | None"]


def meetings_overlap(
    first: Sequence[MeetingTime],
    second: Sequence[MeetingTime],
) -> bool:
    """Whether any meeting in one list overlaps any meeting in the other."""
    return any(a.overlaps(b) for a in first for b in second)


def sections_overlap(a: SelectedSection | Section, b: SelectedSection | Section) -> bool:
    """Whether two sections meet at the same time on some day."""
    return meetings_overlap(a.meeting_times, b.meeting_times)


class ConflictDetector:
    """Scans a selected section list for time and capacity problems."""

    def detect(
        self,
        selected: Sequence[SelectedSection],
        lookup: SectionLookup,
    ) -> list[Conflict]:
        """Detect conflicts in a selection.

        Args:
            selected: Sections chosen for a schedule.
            lookup: Returns the live section record for (course_code, section_id).

        Returns:
            One time conflict per overlapping section pair plus one capacity
            conflict per full section. Order is not significant.
        """
        return self.time_conflicts(selected) + self.capacity_conflicts(selected, lookup)

    def time_conflicts(self, selected: Sequence[SelectedSection]) -> list[Conflict]:
        conflicts = []
        for i, first in enumerate(selected):
            for second in selected[i + 1 :]:
                if sections_overlap(first, second):
                    conflicts.append(
                        Conflict(
                            kind=ConflictKind.TIME,
                            message=(
                                f"Time conflict between {first.course_code} "
                                f"and {second.course_code}"
                            ),
                            affected_courses=(first.course_code, second.course_code),
                        )
                    )
        return conflicts

    def capacity_conflicts(
        self,
        selected: Sequence[SelectedSection],
        lookup: SectionLookup,
    ) -> list[Conflict]:
        conflicts = []
        for section in selected:
            live = lookup(section.course_code, section.section_id)
            if live is not None and live.is_full:
                conflicts.append(
                    Conflict(
                        kind=ConflictKind.CAPACITY,
                        message=f"{section.course_code} section {section.section_number} is full",
                        affected_courses=(section.course_code,),
                    )
                )
        return conflicts
