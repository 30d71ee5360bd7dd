"""Intent stores - Where registration intents live between sweeps."""

from __future__ import annotations

import json
import threading
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol

from sqlalchemy import select

from coursehub.catalog import Day, MeetingTime
from coursehub.planner import SelectedSection
from coursehub.registration.database import Database, IntentRecord
from coursehub.registration.models import ACTIVE_STATUSES, IntentStatus, RegistrationIntent

if TYPE_CHECKING:
    from collections.abc import Iterable


class IntentStore(Protocol):
    """Interface for registration intent persistence."""

    def get(self, intent_id: str) -> RegistrationIntent | None:
        """Get an intent by ID, or None."""
        ...

    def put(self, intent: RegistrationIntent) -> None:
        """Insert or replace an intent."""
        ...

    def delete(self, intent_id: str) -> bool:
        """Delete an intent. Returns False if it did not exist."""
        ...

    def list_all(self) -> list[RegistrationIntent]:
        """List every intent, oldest first."""
        ...

    def list_for_user(self, user_id: str) -> list[RegistrationIntent]:
        """List one user's intents, oldest first."""
        ...

    def scan_eligible(self, now: datetime) -> list[RegistrationIntent]:
        """List non-terminal intents whose target instant has arrived."""
        ...


def _sort_key(intent: RegistrationIntent) -> tuple[datetime, datetime, str]:
    return (intent.target_instant, intent.created_at, intent.id)


class InMemoryIntentStore:
    """Process-local intent store backed by a dict."""

    def __init__(self) -> None:
        self._intents: dict[str, RegistrationIntent] = {}
        self._lock = threading.Lock()

    def get(self, intent_id: str) -> RegistrationIntent | None:
        with self._lock:
            return self._intents.get(intent_id)

    def put(self, intent: RegistrationIntent) -> None:
        with self._lock:
            self._intents[intent.id] = intent

    def delete(self, intent_id: str) -> bool:
        with self._lock:
            return self._intents.pop(intent_id, None) is not None

    def list_all(self) -> list[RegistrationIntent]:
        with self._lock:
            intents = list(self._intents.values())
        return sorted(intents, key=lambda i: (i.created_at, i.id))

    def list_for_user(self, user_id: str) -> list[RegistrationIntent]:
        return [i for i in self.list_all() if i.user_id == user_id]

    def scan_eligible(self, now: datetime) -> list[RegistrationIntent]:
        with self._lock:
            intents = [
                i for i in self._intents.values() if not i.is_terminal and i.target_instant <= now
            ]
        return sorted(intents, key=_sort_key)


# --- Serialization ---


def sections_to_json(sections: Iterable[SelectedSection]) -> str:
    """Serialize selected sections to a JSON document."""
    return json.dumps(
        [
            {
                "course_code": s.course_code,
                "course_name": s.course_name,
                "section_id": s.section_id,
                "section_number": s.section_number,
                "professor": s.professor,
                "credits": s.credits,
                "meeting_times": [
                    {"day": m.day.value, "start": m.start, "end": m.end} for m in s.meeting_times
                ],
            }
            for s in sections
        ]
    )


def sections_from_json(document: str) -> tuple[SelectedSection, ...]:
    """Parse a JSON document written by sections_to_json."""
    items: list[dict[str, Any]] = json.loads(document)
    return tuple(
        SelectedSection(
            course_code=item["course_code"],
            course_name=item["course_name"],
            section_id=item["section_id"],
            section_number=item["section_number"],
            professor=item["professor"],
            credits=item["credits"],
            meeting_times=tuple(
                MeetingTime(day=Day(m["day"]), start=m["start"], end=m["end"])
                for m in item["meeting_times"]
            ),
        )
        for item in items
    )


def _to_db_time(value: datetime | None) -> datetime | None:
    """SQLite drops tzinfo, so store naive UTC."""
    if value is None:
        return None
    return value.astimezone(UTC).replace(tzinfo=None)


def _from_db_time(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    return value.replace(tzinfo=UTC)


def _to_intent(record: IntentRecord) -> RegistrationIntent:
    return RegistrationIntent(
        id=record.id,
        user_id=record.user_id,
        schedule_id=record.schedule_id,
        sections=sections_from_json(record.sections),
        target_instant=record.target_instant.replace(tzinfo=UTC),
        created_at=record.created_at.replace(tzinfo=UTC),
        status=IntentStatus(record.status),
        attempts=record.attempts,
        last_attempt_at=_from_db_time(record.last_attempt_at),
        last_error=record.last_error,
    )


class SqlIntentStore:
    """Intent store backed by SQLite through SQLAlchemy.

    Creates the database and tables if they don't exist.
    """

    def __init__(self, db_path: str = "coursehub.db") -> None:
        """Initialize the store.

        Args:
            db_path: Path to SQLite database file, or ":memory:".
        """
        self._db = Database(db_path)
        self._db.create_tables()

    def close(self) -> None:
        """Close the database connection."""
        self._db.close()

    def get(self, intent_id: str) -> RegistrationIntent | None:
        session = self._db.get_session()
        try:
            record = session.get(IntentRecord, intent_id)
            return _to_intent(record) if record is not None else None
        finally:
            session.close()

    def put(self, intent: RegistrationIntent) -> None:
        session = self._db.get_session()
        try:
            record = IntentRecord(
                id=intent.id,
                user_id=intent.user_id,
                schedule_id=intent.schedule_id,
                sections=sections_to_json(intent.sections),
                target_instant=_to_db_time(intent.target_instant),
                status=intent.status.value,
                attempts=intent.attempts,
                last_attempt_at=_to_db_time(intent.last_attempt_at),
                last_error=intent.last_error,
                created_at=_to_db_time(intent.created_at),
            )
            session.merge(record)
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def delete(self, intent_id: str) -> bool:
        session = self._db.get_session()
        try:
            record = session.get(IntentRecord, intent_id)
            if record is None:
                return False
            session.delete(record)
            session.commit()
            return True
        finally:
            session.close()

    def list_all(self) -> list[RegistrationIntent]:
        return self._query(select(IntentRecord))

    def list_for_user(self, user_id: str) -> list[RegistrationIntent]:
        return self._query(select(IntentRecord).where(IntentRecord.user_id == user_id))

    def scan_eligible(self, now: datetime) -> list[RegistrationIntent]:
        stmt = (
            select(IntentRecord)
            .where(
                IntentRecord.status.in_([s.value for s in ACTIVE_STATUSES]),
                IntentRecord.target_instant <= _to_db_time(now),
            )
            .order_by(IntentRecord.target_instant, IntentRecord.created_at, IntentRecord.id)
        )
        session = self._db.get_session()
        try:
            return [_to_intent(r) for r in session.execute(stmt).scalars().all()]
        finally:
            session.close()

    def _query(self, stmt: Any) -> list[RegistrationIntent]:
        stmt = stmt.order_by(IntentRecord.created_at, IntentRecord.id)
        session = self._db.get_session()
        try:
            return [_to_intent(r) for r in session.execute(stmt).scalars().all()]
        finally:
            session.close()
