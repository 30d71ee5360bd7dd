"""Unit tests for schedule proposers."""

import json
from collections.abc import Iterator

import httpx
import pytest

from coursehub.catalog import Course, CourseCatalog, Day, MeetingTime, Section, parse_clock
from coursehub.planner import (
    HttpScheduleProposer,
    PreferenceParameters,
    PreferenceProposer,
    ProposedSection,
    ProposerError,
    ProposerResult,
    sections_overlap,
)
from coursehub.planner.proposer import parse_proposal


def _picks(result: ProposerResult) -> dict[str, str]:
    return {p.course_code: p.section_id for p in result.sections}


@pytest.mark.unit
class TestPreferenceProposer:
    """Tests for the local search proposer."""

    def test_finds_conflict_free_selection(self, small_catalog: CourseCatalog) -> None:
        courses = small_catalog.all()

        result = PreferenceProposer().propose(courses, PreferenceParameters.defaults(), ["CS2"])

        assert _picks(result) == {"CS1": "cs1-a", "CS2": "cs2-b", "MATH1": "math1-b"}
        # Picks follow the order of the courses given
        assert [p.course_code for p in result.sections] == ["CS1", "CS2", "MATH1"]
        assert 0.0 <= result.score <= 100.0

    def test_never_picks_full_section(self, small_catalog: CourseCatalog) -> None:
        math = small_catalog.require("MATH1")

        result = PreferenceProposer().propose([math], PreferenceParameters.defaults(), ["MATH1"])

        assert result.sections == [ProposedSection("MATH1", "math1-b")]

    def test_late_start_preference(self, small_catalog: CourseCatalog) -> None:
        prefs = PreferenceParameters(
            prioritize_late_start=100, preferred_start_time=parse_clock("11:00")
        )

        result = PreferenceProposer().propose([small_catalog.require("CS1")], prefs, ["CS1"])

        assert _picks(result) == {"CS1": "cs1-b"}

    def test_greedy_when_everything_overlaps(self) -> None:
        def only_section(code: str) -> Course:
            meeting = MeetingTime(
                day=Day.MONDAY, start=parse_clock("10:00"), end=parse_clock("11:00")
            )
            section = Section(
                id=f"{code}-1",
                section_number="001",
                professor="Staff",
                meeting_times=(meeting,),
                capacity=10,
            )
            return Course(code=code, name=code, credits=3, sections=(section,))

        courses = [only_section("A"), only_section("B")]

        result = PreferenceProposer().propose(courses, PreferenceParameters.defaults(), ["A", "B"])

        assert _picks(result) == {"A": "A-1", "B": "B-1"}

    def test_exhausted_budget_still_covers_every_course(self, small_catalog: CourseCatalog) -> None:
        courses = small_catalog.all()

        result = PreferenceProposer(search_budget=1).propose(
            courses, PreferenceParameters.defaults(), ["CS2", "MATH1"]
        )

        assert set(_picks(result)) == {"CS1", "CS2", "MATH1"}

    def test_selection_has_no_overlaps(self, small_catalog: CourseCatalog) -> None:
        result = PreferenceProposer().propose(
            small_catalog.all(), PreferenceParameters(prioritize_early_end=100), ["CS2"]
        )
        chosen = [small_catalog.get_section(p.course_code, p.section_id) for p in result.sections]

        for i, first in enumerate(chosen):
            for second in chosen[i + 1 :]:
                assert not sections_overlap(first, second)


@pytest.mark.unit
class TestParseProposal:
    """Tests for proposer response parsing."""

    def test_valid_body(self) -> None:
        result = parse_proposal(
            {"sections": [{"courseCode": "CS1", "sectionId": "cs1-a"}], "score": 81}
        )

        assert result.sections == [ProposedSection("CS1", "cs1-a")]
        assert result.score == 81.0

    @pytest.mark.parametrize(
        "body",
        [
            [],
            {"score": 50},
            {"sections": [], "score": "high"},
            {"sections": [], "score": True},
            {"sections": ["CS1"], "score": 50},
            {"sections": [{"courseCode": "CS1"}], "score": 50},
        ],
    )
    def test_malformed_body(self, body: object) -> None:
        with pytest.raises(ProposerError):
            parse_proposal(body)


@pytest.mark.unit
class TestHttpScheduleProposer:
    """Tests for the remote proposer client."""

    @pytest.fixture
    def proposer(self) -> Iterator[HttpScheduleProposer]:
        proposer = HttpScheduleProposer("http://proposer.test/", token="secret")
        yield proposer
        proposer.close()

    def _mock(self, proposer: HttpScheduleProposer, handler) -> list[httpx.Request]:
        seen: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        proposer._client = httpx.Client(transport=httpx.MockTransport(record))
        return seen

    def test_success(self, proposer: HttpScheduleProposer, small_catalog: CourseCatalog) -> None:
        seen = self._mock(
            proposer,
            lambda _: httpx.Response(
                200,
                json={"sections": [{"courseCode": "MATH1", "sectionId": "math1-b"}], "score": 64.5},
            ),
        )

        result = proposer.propose(
            [small_catalog.require("MATH1")], PreferenceParameters.defaults(), ["MATH1"]
        )

        assert result.sections == [ProposedSection("MATH1", "math1-b")]
        assert result.score == 64.5

        request = seen[0]
        assert request.method == "POST"
        assert request.url == "http://proposer.test/propose"
        payload = json.loads(request.content)
        assert payload["requiredCourses"] == ["MATH1"]
        # Full sections are not offered to the proposer
        assert [s["id"] for s in payload["courses"][0]["sections"]] == ["math1-b"]
        assert payload["preferences"]["gapPreference"] == "balanced"

    def test_non_200(self, proposer: HttpScheduleProposer, small_catalog: CourseCatalog) -> None:
        self._mock(proposer, lambda _: httpx.Response(500, text="boom"))

        with pytest.raises(ProposerError, match="500"):
            proposer.propose(small_catalog.all(), PreferenceParameters.defaults(), ["CS1"])

    def test_invalid_json(
        self, proposer: HttpScheduleProposer, small_catalog: CourseCatalog
    ) -> None:
        self._mock(proposer, lambda _: httpx.Response(200, text="not json"))

        with pytest.raises(ProposerError, match="invalid JSON"):
            proposer.propose(small_catalog.all(), PreferenceParameters.defaults(), ["CS1"])

    def test_transport_error(
        self, proposer: HttpScheduleProposer, small_catalog: CourseCatalog
    ) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self._mock(proposer, refuse)

        with pytest.raises(ProposerError, match="request failed"):
            proposer.propose(small_catalog.all(), PreferenceParameters.defaults(), ["CS1"])

    def test_client_headers(self, proposer: HttpScheduleProposer) -> None:
        assert proposer.client.headers["Authorization"] == "Bearer secret"
        assert proposer.base_url == "http://proposer.test"

    def test_close_resets_client(self, proposer: HttpScheduleProposer) -> None:
        client = proposer.client
        proposer.close()

        assert client.is_closed
        assert proposer._client is None
