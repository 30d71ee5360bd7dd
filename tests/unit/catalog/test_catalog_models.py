"""Unit tests for catalog data models."""

import pytest

from coursehub.catalog import Course, Day, MeetingTime, Section, format_clock, parse_clock


@pytest.mark.unit
class TestClock:
    """Tests for clock parsing and formatting."""

    @pytest.mark.parametrize(
        ("text", "minutes"),
        [("00:00", 0), ("09:05", 545), ("13:35", 815), ("24:00", 1440)],
    )
    def test_parse_clock(self, text: str, minutes: int) -> None:
        assert parse_clock(text) == minutes

    @pytest.mark.parametrize("text", ["9", "25:00", "10:60", "ten:00", "24:30"])
    def test_parse_clock_invalid(self, text: str) -> None:
        with pytest.raises(ValueError, match="expected HH:MM"):
            parse_clock(text)

    def test_format_clock(self) -> None:
        assert format_clock(545) == "09:05"
        assert format_clock(0) == "00:00"


@pytest.mark.unit
class TestDay:
    """Tests for Day.parse."""

    @pytest.mark.parametrize(
        ("text", "day"),
        [
            ("Monday", Day.MONDAY),
            ("mon", Day.MONDAY),
            ("TUES", Day.TUESDAY),
            ("thurs", Day.THURSDAY),
            (" friday ", Day.FRIDAY),
        ],
    )
    def test_parse(self, text: str, day: Day) -> None:
        assert Day.parse(text) is day

    def test_parse_unknown(self) -> None:
        with pytest.raises(ValueError, match="Unknown day"):
            Day.parse("Funday")


@pytest.mark.unit
class TestMeetingTime:
    """Tests for MeetingTime overlap semantics."""

    def test_overlapping_same_day(self) -> None:
        a = MeetingTime(Day.MONDAY, 540, 600)
        b = MeetingTime(Day.MONDAY, 570, 630)
        assert a.overlaps(b)
        assert b.overlaps(a)

    def test_back_to_back_does_not_overlap(self) -> None:
        a = MeetingTime(Day.MONDAY, 540, 600)
        b = MeetingTime(Day.MONDAY, 600, 660)
        assert not a.overlaps(b)
        assert not b.overlaps(a)

    def test_different_days_do_not_overlap(self) -> None:
        a = MeetingTime(Day.MONDAY, 540, 600)
        b = MeetingTime(Day.TUESDAY, 540, 600)
        assert not a.overlaps(b)

    def test_containment_overlaps(self) -> None:
        outer = MeetingTime(Day.FRIDAY, 480, 720)
        inner = MeetingTime(Day.FRIDAY, 540, 600)
        assert outer.overlaps(inner)

    @pytest.mark.parametrize(("start", "end"), [(600, 600), (600, 540), (-1, 60), (1400, 1500)])
    def test_invalid_interval(self, start: int, end: int) -> None:
        with pytest.raises(ValueError, match="Invalid meeting interval"):
            MeetingTime(Day.MONDAY, start, end)

    def test_str(self) -> None:
        assert str(MeetingTime(Day.MONDAY, 545, 595)) == "Monday 09:05-09:55"


@pytest.mark.unit
class TestSection:
    """Tests for Section."""

    def test_full_when_enrolled_reaches_capacity(self) -> None:
        section = Section(id="s", section_number="001", professor="P", capacity=10, enrolled=10)
        assert section.is_full
        assert section.seats_available == 0

    def test_open_section(self) -> None:
        section = Section(id="s", section_number="001", professor="P", capacity=10, enrolled=4)
        assert not section.is_full
        assert section.seats_available == 6

    def test_rating_out_of_range(self) -> None:
        with pytest.raises(ValueError, match="professor_rating"):
            Section(id="s", section_number="001", professor="P", professor_rating=6.0)

    def test_negative_capacity(self) -> None:
        with pytest.raises(ValueError, match="capacity"):
            Section(id="s", section_number="001", professor="P", capacity=-1)


@pytest.mark.unit
class TestCourse:
    """Tests for Course."""

    def test_available_sections_skip_full(self) -> None:
        full = Section(id="a", section_number="001", professor="P", capacity=5, enrolled=5)
        open_ = Section(id="b", section_number="002", professor="Q", capacity=5, enrolled=1)
        course = Course(code="X", name="X", credits=3, sections=(full, open_))

        assert course.available_sections == [open_]
        assert course.get_section("a") is full
        assert course.get_section("zzz") is None

    def test_credits_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="credits"):
            Course(code="X", name="X", credits=0)

    def test_self_prerequisite_rejected(self) -> None:
        with pytest.raises(ValueError, match="own prerequisite"):
            Course(code="X", name="X", credits=3, prerequisites=frozenset({"X"}))

    def test_duplicate_section_ids_rejected(self) -> None:
        section = Section(id="a", section_number="001", professor="P")
        with pytest.raises(ValueError, match="duplicate section id"):
            Course(code="X", name="X", credits=3, sections=(section, section))
