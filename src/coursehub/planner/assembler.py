"""Schedule Assembler - Resolver, Catalog, Proposer and Conflict Detector in one pass."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from coursehub.planner.conflicts import ConflictDetector
from coursehub.planner.exceptions import InvalidScheduleRequestError, ProposerError
from coursehub.planner.models import (
    Conflict,
    ConflictKind,
    GeneratedSchedule,
    PreferenceParameters,
    SelectedSection,
)
from coursehub.planner.presets import PresetRegistry
from coursehub.planner.resolver import PrerequisiteResolver
from coursehub.planner.scoring import fallback_score, finalize_score

if TYPE_CHECKING:
    from collections.abc import Sequence

    from coursehub.catalog import Course, CourseCatalog, Section
    from coursehub.planner.models import ProposerResult, ScheduleRequest
    from coursehub.planner.proposer import ScheduleProposer

logger = logging.getLogger(__name__)


class ScheduleAssembler:
    """Builds a GeneratedSchedule from a ScheduleRequest.

    Pipeline: validate request, resolve the prerequisite closure, fetch the
    schedulable courses, ask the proposer for one section per course, detect
    conflicts, clamp the score. A failing or missing proposer never fails
    the request: the first open section of each course is used instead.
    """

    def __init__(
        self,
        catalog: CourseCatalog,
        proposer: ScheduleProposer | None = None,
        presets: PresetRegistry | None = None,
        detector: ConflictDetector | None = None,
    ) -> None:
        """Initialize the assembler.

        Args:
            catalog: Course catalog supplying course and live section data.
            proposer: Section-picking strategy. None always uses the fallback.
            presets: Preset lookup for requests that name a preset.
            detector: Conflict detector (default instance if omitted).
        """
        self.catalog = catalog
        self.proposer = proposer
        self.presets = presets if presets is not None else PresetRegistry()
        self.detector = detector or ConflictDetector()
        self.resolver = PrerequisiteResolver(catalog)

    def generate(self, request: ScheduleRequest) -> GeneratedSchedule:
        """Generate a schedule for a request.

        Args:
            request: Required courses plus preferences or a preset ID.

        Returns:
            A new GeneratedSchedule.

        Raises:
            InvalidScheduleRequestError: If no courses are given or the preset is unknown.
        """
        requested = list(dict.fromkeys(c.strip() for c in request.courses if c and c.strip()))
        if not requested:
            raise InvalidScheduleRequestError("At least one required course is needed")

        preferences = self._preferences_for(request)
        conflicts: list[Conflict] = []

        for code in sorted(self.resolver.missing(requested)):
            conflicts.append(
                Conflict(
                    kind=ConflictKind.PREREQUISITE,
                    message=f"{code} was not found in the course catalog",
                    affected_courses=(code,),
                )
            )

        resolved = self.resolver.resolve(requested)
        logger.info(
            "Resolved %d requested courses to %d with prerequisites",
            len(requested),
            len(resolved),
        )

        schedulable: list[Course] = []
        for course in self.catalog.all():
            if course.code not in resolved:
                continue
            if course.available_sections:
                schedulable.append(course)
            else:
                conflicts.append(
                    Conflict(
                        kind=ConflictKind.PREREQUISITE,
                        message=f"{course.code} has no available sections and was left out",
                        affected_courses=(course.code,),
                    )
                )

        picks, raw_score, used_fallback = self._select(schedulable, preferences, requested)

        selected = [SelectedSection.from_section(course, section) for course, section in picks]
        conflicts.extend(self.detector.detect(selected, self.catalog.get_section))

        schedule = GeneratedSchedule(
            sections=tuple(selected),
            conflicts=tuple(conflicts),
            score=finalize_score(raw_score),
            user_id=request.user_id,
            used_fallback=used_fallback,
        )
        logger.info(
            "Generated schedule %s: %d sections, %d conflicts, score %d%s",
            schedule.id,
            len(schedule.sections),
            len(schedule.conflicts),
            schedule.score,
            " (fallback)" if used_fallback else "",
        )
        return schedule

    def _preferences_for(self, request: ScheduleRequest) -> PreferenceParameters:
        if request.preferences is not None:
            return request.preferences
        if request.preset_id is not None:
            return self.presets.get(request.preset_id, user_id=request.user_id).parameters
        return PreferenceParameters.defaults()

    def _select(
        self,
        courses: list[Course],
        preferences: PreferenceParameters,
        requested: Sequence[str],
    ) -> tuple[list[tuple[Course, Section]], float, bool]:
        """Pick sections via the proposer, falling back on any failure."""
        if self.proposer is not None:
            try:
                result = self.proposer.propose(courses, preferences, requested)
                picks = self._validate_proposal(result, courses)
                return picks, float(result.score), False
            except Exception as e:  # noqa: BLE001
                logger.warning("Schedule proposer failed, using fallback selection: %s", e)

        picks = first_available_selection(courses)
        return picks, fallback_score([section for _, section in picks], preferences), True

    def _validate_proposal(
        self,
        result: ProposerResult,
        courses: list[Course],
    ) -> list[tuple[Course, Section]]:
        """Check a proposal against the schedulable courses.

        Raises:
            ProposerError: If the proposal names unknown courses or sections,
                picks a full section, repeats or misses a course, or has a
                non-numeric score.
        """
        score = result.score
        if isinstance(score, bool) or not isinstance(score, int | float) or math.isnan(score):
            raise ProposerError(f"Proposal score is not a number: {score!r}")

        by_code = {course.code: course for course in courses}
        chosen: dict[str, Section] = {}
        for pick in result.sections:
            course = by_code.get(pick.course_code)
            if course is None:
                raise ProposerError(f"Proposal names unschedulable course {pick.course_code}")
            if pick.course_code in chosen:
                raise ProposerError(f"Proposal picks {pick.course_code} more than once")
            section = course.get_section(pick.section_id)
            if section is None:
                raise ProposerError(
                    f"Proposal names unknown section {pick.section_id} of {pick.course_code}"
                )
            if section.is_full:
                raise ProposerError(f"Proposal picks full section {pick.section_id}")
            chosen[pick.course_code] = section

        missing = [code for code in by_code if code not in chosen]
        if missing:
            raise ProposerError(f"Proposal leaves out {', '.join(missing)}")

        return [(course, chosen[course.code]) for course in courses]


def first_available_selection(courses: Sequence[Course]) -> list[tuple[Course, Section]]:
    """Deterministic selection: the first open section of each course."""
    picks = []
    for course in courses:
        available = course.available_sections
        if available:
            picks.append((course, available[0]))
    return picks
