"""Preference scoring for sections and whole schedules.

Every criterion produces a value in [0, 1] and a weight; a score is the
weighted average scaled to 0-100. Criteria whose preference is absent are
skipped, and a section with no applicable criteria scores a neutral 50.
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from coursehub.planner.models import ClassSizePreference, GapPreference, OnlinePreference

if TYPE_CHECKING:
    from collections.abc import Sequence

    from coursehub.catalog import Section
    from coursehub.planner.models import PreferenceParameters

DEFAULT_LATE_START = 10 * 60
DEFAULT_EARLY_END = 15 * 60
# Minutes past the preferred boundary at which a time criterion reaches zero
TIME_TOLERANCE = 180
BALANCED_GAP = 60
AVOID_DAYS_WEIGHT = 100.0
CATEGORY_WEIGHT = 50.0
GAP_SHARE = 0.2
NEUTRAL_SCORE = 50.0

SMALL_CLASS_MAX = 30
MEDIUM_CLASS_MAX = 100


def class_size(section: Section) -> ClassSizePreference:
    """Bucket a section by capacity."""
    if section.capacity <= SMALL_CLASS_MAX:
        return ClassSizePreference.SMALL
    if section.capacity <= MEDIUM_CLASS_MAX:
        return ClassSizePreference.MEDIUM
    return ClassSizePreference.LARGE


def delivery_format(section: Section) -> OnlinePreference:
    if section.is_online:
        return OnlinePreference.ONLINE
    if section.is_hybrid:
        return OnlinePreference.HYBRID
    return OnlinePreference.IN_PERSON


def _is_set(weight: float | None) -> bool:
    """A priority weight counts only when present and non-zero."""
    return bool(weight)


def _criteria(section: Section, prefs: PreferenceParameters) -> list[tuple[float, float]]:
    """Collect (weight, value) pairs for one section."""
    criteria: list[tuple[float, float]] = []

    if _is_set(prefs.prioritize_easy_professors):
        if section.professor_difficulty is not None:
            criteria.append(
                (prefs.prioritize_easy_professors, (5.0 - section.professor_difficulty) / 5.0)
            )
        elif section.professor_rating is not None:
            criteria.append((prefs.prioritize_easy_professors, section.professor_rating / 5.0))

    meetings = section.meeting_times

    if _is_set(prefs.prioritize_late_start):
        preferred = prefs.preferred_start_time
        if preferred is None:
            preferred = DEFAULT_LATE_START
        start = min((m.start for m in meetings), default=None)
        value = 1.0 if start is None or start >= preferred else (
            max(0.0, 1.0 - (preferred - start) / TIME_TOLERANCE)
        )
        criteria.append((prefs.prioritize_late_start, value))

    if _is_set(prefs.prioritize_early_end):
        preferred = prefs.preferred_end_time
        if preferred is None:
            preferred = DEFAULT_EARLY_END
        end = max((m.end for m in meetings), default=None)
        value = 1.0 if end is None or end <= preferred else (
            max(0.0, 1.0 - (end - preferred) / TIME_TOLERANCE)
        )
        criteria.append((prefs.prioritize_early_end, value))

    if prefs.avoid_days:
        hits_avoided = any(m.day in prefs.avoid_days for m in meetings)
        criteria.append((AVOID_DAYS_WEIGHT, 0.0 if hits_avoided else 1.0))

    if prefs.online_preference not in (None, OnlinePreference.ANY):
        matches = delivery_format(section) == prefs.online_preference
        criteria.append((CATEGORY_WEIGHT, 1.0 if matches else 0.0))

    if prefs.class_size_preference not in (None, ClassSizePreference.ANY):
        matches = class_size(section) == prefs.class_size_preference
        criteria.append((CATEGORY_WEIGHT, 1.0 if matches else 0.0))

    return criteria


def score_section(section: Section, prefs: PreferenceParameters) -> float:
    """Score one section against the preferences, 0-100."""
    criteria = _criteria(section, prefs)
    total_weight = sum(weight for weight, _ in criteria)
    if total_weight <= 0:
        return NEUTRAL_SCORE
    return 100.0 * sum(weight * value for weight, value in criteria) / total_weight


def gap_score(sections: Sequence[Section], gap_preference: GapPreference) -> float | None:
    """Score idle time between same-day classes, 0-1.

    Returns:
        None when no day has two classes (nothing to judge).
    """
    by_day: dict[object, list[tuple[int, int]]] = defaultdict(list)
    for section in sections:
        for meeting in section.meeting_times:
            by_day[meeting.day].append((meeting.start, meeting.end))

    gaps: list[int] = []
    for intervals in by_day.values():
        intervals.sort()
        for (_, prev_end), (next_start, _) in zip(intervals, intervals[1:], strict=False):
            gaps.append(max(0, next_start - prev_end))

    if not gaps:
        return None

    average = sum(gaps) / len(gaps)
    match gap_preference:
        case GapPreference.MINIMIZE:
            return max(0.0, 1.0 - average / (2 * BALANCED_GAP))
        case GapPreference.MAXIMIZE:
            return min(1.0, average / (2 * BALANCED_GAP))
        case _:
            return max(0.0, 1.0 - abs(average - BALANCED_GAP) / BALANCED_GAP)


def score_schedule(sections: Sequence[Section], prefs: PreferenceParameters) -> float:
    """Score a full selection, 0-100.

    The mean section score carries most of the weight; the gap criterion,
    when applicable, contributes a fixed share.
    """
    if not sections:
        return 0.0

    average = sum(score_section(s, prefs) for s in sections) / len(sections)
    if prefs.gap_preference is None:
        return average

    gaps = gap_score(sections, prefs.gap_preference)
    if gaps is None:
        return average
    return (1.0 - GAP_SHARE) * average + GAP_SHARE * 100.0 * gaps


def fallback_score(sections: Sequence[Section], prefs: PreferenceParameters) -> float:
    """Heuristic score used when no proposer result is available.

    Starts at 80; per section adds (5 - difficulty) * 2 when the easy-professor
    weight is non-zero, and (rating - 3) * 5 when rated. Clamped to 0-100.
    """
    score = 80.0
    for section in sections:
        if _is_set(prefs.prioritize_easy_professors) and section.professor_difficulty is not None:
            score += (5.0 - section.professor_difficulty) * 2
        if section.professor_rating is not None:
            score += (section.professor_rating - 3.0) * 5
    return clamp_score(score)


def clamp_score(score: float) -> float:
    """Clamp a raw score into 0-100."""
    return min(100.0, max(0.0, score))


def finalize_score(raw: float) -> int:
    """Clamp to 0-100 and round half up to an integer."""
    clamped = clamp_score(raw)
    return int(clamped + 0.5)
