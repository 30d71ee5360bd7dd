"""Schedule proposers - Pick one section per course and score the result."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from coursehub.catalog import format_clock
from coursehub.logging import sanitize_for_log, truncate_output
from coursehub.planner.conflicts import sections_overlap
from coursehub.planner.exceptions import ProposerError
from coursehub.planner.models import ProposedSection, ProposerResult
from coursehub.planner.scoring import score_schedule, score_section

if TYPE_CHECKING:
    from collections.abc import Sequence

    from coursehub.catalog import Course, Section
    from coursehub.planner.models import PreferenceParameters

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_BUDGET = 20_000


class ScheduleProposer(Protocol):
    """Interface for pluggable schedule proposers."""

    def propose(
        self,
        courses: Sequence[Course],
        preferences: PreferenceParameters,
        required_codes: Sequence[str],
    ) -> ProposerResult:
        """Pick one section per course and return a raw score."""
        ...


class PreferenceProposer:
    """Local proposer that searches for the best conflict-free selection.

    Courses are assigned fewest-candidates first. A depth-first search over
    open, pairwise non-overlapping sections maximizes the summed section
    score, bounded by a node budget. When no conflict-free assignment exists
    the best section per course is picked greedily.
    """

    def __init__(self, search_budget: int = DEFAULT_SEARCH_BUDGET) -> None:
        """Initialize the proposer.

        Args:
            search_budget: Maximum search nodes to expand per proposal.
        """
        self.search_budget = search_budget

    def propose(
        self,
        courses: Sequence[Course],
        preferences: PreferenceParameters,
        required_codes: Sequence[str],
    ) -> ProposerResult:
        ranked: list[tuple[Course, list[tuple[float, Section]]]] = []
        for course in courses:
            candidates = [(score_section(s, preferences), s) for s in course.available_sections]
            candidates.sort(key=lambda pair: pair[0], reverse=True)
            if candidates:
                ranked.append((course, candidates))
        ranked.sort(key=lambda item: len(item[1]))

        picks = self._search(ranked)
        if picks is None:
            logger.info("No conflict-free assignment for %d courses, using greedy", len(ranked))
            picks = self._greedy(ranked)

        order = {course.code: index for index, course in enumerate(courses)}
        chosen = sorted(picks.items(), key=lambda item: order[item[0]])
        score = score_schedule([section for _, section in chosen], preferences)
        return ProposerResult(
            sections=[ProposedSection(code, section.id) for code, section in chosen],
            score=score,
        )

    def _search(
        self,
        ranked: list[tuple[Course, list[tuple[float, Section]]]],
    ) -> dict[str, Section] | None:
        # Upper bound on what the remaining courses can still add
        best_remaining = [0.0] * (len(ranked) + 1)
        for i in range(len(ranked) - 1, -1, -1):
            best_remaining[i] = best_remaining[i + 1] + ranked[i][1][0][0]

        best: dict[str, Section] | None = None
        best_total = -1.0
        budget = self.search_budget
        chosen: list[tuple[str, Section]] = []

        def visit(depth: int, total: float) -> None:
            nonlocal best, best_total, budget
            if budget <= 0:
                return
            budget -= 1
            if depth == len(ranked):
                if total > best_total:
                    best_total = total
                    best = dict(chosen)
                return
            if total + best_remaining[depth] <= best_total:
                return
            course, candidates = ranked[depth]
            for value, section in candidates:
                if any(sections_overlap(section, other) for _, other in chosen):
                    continue
                chosen.append((course.code, section))
                visit(depth + 1, total + value)
                chosen.pop()

        visit(0, 0.0)
        if budget <= 0:
            logger.debug("Search budget exhausted, keeping best found so far")
        return best

    def _greedy(
        self,
        ranked: list[tuple[Course, list[tuple[float, Section]]]],
    ) -> dict[str, Section]:
        picks: dict[str, Section] = {}
        for course, candidates in ranked:
            taken = list(picks.values())
            pick = next(
                (s for _, s in candidates if not any(sections_overlap(s, o) for o in taken)),
                candidates[0][1],
            )
            picks[course.code] = pick
        return picks


def _serialize_course(course: Course) -> dict[str, Any]:
    return {
        "courseCode": course.code,
        "courseName": course.name,
        "credits": course.credits,
        "prerequisites": sorted(course.prerequisites),
        "sections": [
            {
                "id": s.id,
                "sectionNumber": s.section_number,
                "professor": s.professor,
                "professorRating": s.professor_rating,
                "professorDifficulty": s.professor_difficulty,
                "schedule": [
                    {
                        "day": m.day.value,
                        "startTime": format_clock(m.start),
                        "endTime": format_clock(m.end),
                    }
                    for m in s.meeting_times
                ],
                "capacity": s.capacity,
                "enrolled": s.enrolled,
                "isOnline": s.is_online,
                "isHybrid": s.is_hybrid,
            }
            for s in course.available_sections
        ],
    }


def _serialize_preferences(prefs: PreferenceParameters) -> dict[str, Any]:
    return {
        "prioritizeEasyProfessors": prefs.prioritize_easy_professors,
        "prioritizeLateStart": prefs.prioritize_late_start,
        "prioritizeEarlyEnd": prefs.prioritize_early_end,
        "preferredStartTime": (
            format_clock(prefs.preferred_start_time)
            if prefs.preferred_start_time is not None
            else None
        ),
        "preferredEndTime": (
            format_clock(prefs.preferred_end_time)
            if prefs.preferred_end_time is not None
            else None
        ),
        "avoidDays": sorted(day.value for day in prefs.avoid_days),
        "gapPreference": prefs.gap_preference,
        "classSizePreference": prefs.class_size_preference,
        "onlinePreference": prefs.online_preference,
    }


class HttpScheduleProposer:
    """Client for a remote schedule proposer service.

    POSTs the schedulable courses and preferences to ``{base_url}/propose``
    and expects ``{"sections": [{"courseCode", "sectionId"}], "score": n}``.
    """

    def __init__(self, base_url: str, timeout: float = 30.0, token: str | None = None) -> None:
        """Initialize the client.

        Args:
            base_url: Proposer service base URL.
            timeout: Request timeout in seconds.
            token: Optional bearer token.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.token = token
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.Client(headers=headers, timeout=self.timeout)
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def propose(
        self,
        courses: Sequence[Course],
        preferences: PreferenceParameters,
        required_codes: Sequence[str],
    ) -> ProposerResult:
        """Request a proposal from the remote service.

        Raises:
            ProposerError: On transport failure, non-200 status or malformed body.
        """
        payload = {
            "courses": [_serialize_course(c) for c in courses],
            "preferences": _serialize_preferences(preferences),
            "requiredCourses": list(required_codes),
        }

        try:
            response = self.client.post(f"{self.base_url}/propose", json=payload)
        except httpx.HTTPError as e:
            raise ProposerError(f"Proposer request failed: {e}") from e

        if response.status_code != 200:
            body = truncate_output(sanitize_for_log(response.text), 200)
            raise ProposerError(f"Proposer returned {response.status_code}: {body}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProposerError(f"Proposer returned invalid JSON: {e}") from e

        return parse_proposal(data)


def parse_proposal(data: Any) -> ProposerResult:
    """Parse a proposer response body.

    Raises:
        ProposerError: If the body does not have the expected shape.
    """
    if not isinstance(data, dict):
        raise ProposerError("Proposal must be a JSON object")

    raw_sections = data.get("sections")
    score = data.get("score")
    if not isinstance(raw_sections, list):
        raise ProposerError("Proposal is missing a 'sections' list")
    if isinstance(score, bool) or not isinstance(score, int | float):
        raise ProposerError("Proposal is missing a numeric 'score'")

    sections = []
    for item in raw_sections:
        if not isinstance(item, dict):
            raise ProposerError("Proposal sections must be objects")
        code = item.get("courseCode")
        section_id = item.get("sectionId")
        if not isinstance(code, str) or not isinstance(section_id, str):
            raise ProposerError("Proposal sections need 'courseCode' and 'sectionId' strings")
        sections.append(ProposedSection(course_code=code, section_id=section_id))

    return ProposerResult(sections=sections, score=float(score))
