"""Data models for the Registration Queue."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime  # noqa: TC003 - used at runtime in dataclass fields
from enum import StrEnum

from coursehub.planner import SelectedSection  # noqa: TC001 - used at runtime in dataclass fields


class IntentStatus(StrEnum):
    """Registration intent state enum."""

    PENDING = "pending"
    QUEUED = "queued"
    REGISTERING = "registering"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (IntentStatus.SUCCESS, IntentStatus.FAILED)


ACTIVE_STATUSES = (IntentStatus.PENDING, IntentStatus.QUEUED, IntentStatus.REGISTERING)


@dataclass(frozen=True)
class RegistrationIntent:
    """A request to register a section set once registration opens.

    Instances are immutable; the queue stores a new version on every
    transition.

    Attributes:
        id: Unique intent ID.
        user_id: Owning user.
        schedule_id: Generated schedule the sections came from.
        sections: Sections to register.
        target_instant: When registration opens (timezone-aware, UTC).
        status: Current state.
        attempts: Registration attempts made so far.
        last_attempt_at: Time of the most recent attempt.
        last_error: Message from the most recent failed attempt.
        created_at: When the intent was enqueued.
    """

    id: str
    user_id: str
    schedule_id: str
    sections: tuple[SelectedSection, ...]
    target_instant: datetime
    created_at: datetime
    status: IntentStatus = IntentStatus.PENDING
    attempts: int = 0
    last_attempt_at: datetime | None = None
    last_error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def __repr__(self) -> str:
        return (
            f"<RegistrationIntent(id={self.id!r}, user_id={self.user_id!r}, "
            f"status={self.status.value!r}, attempts={self.attempts})>"
        )


@dataclass(frozen=True)
class RetryPolicy:
    """When a failed registration attempt is retried.

    Attributes:
        max_attempts: Attempts allowed before the intent fails.
        terminal_markers: Case-insensitive substrings of gateway messages that
            fail the intent immediately. Empty by default, so every failure
            is retried up to max_attempts.
    """

    max_attempts: int = 3
    terminal_markers: tuple[str, ...] = ()

    def should_retry(self, attempts: int, message: str) -> bool:
        """Whether an intent with this many attempts should be queued again."""
        if attempts >= self.max_attempts:
            return False
        lowered = message.lower()
        return not any(marker.lower() in lowered for marker in self.terminal_markers)


@dataclass
class TickResult:
    """Counts from one sweep of the registration queue.

    Attributes:
        promoted: Intents moved from pending to queued.
        attempted: Registration attempts made.
        succeeded: Attempts that registered successfully.
        retried: Failed attempts queued for another try.
        failed: Intents that reached the failed state.
        skipped: Intents skipped because another sweep held them.
        errors: Intents whose processing raised unexpectedly.
    """

    promoted: int = 0
    attempted: int = 0
    succeeded: int = 0
    retried: int = 0
    failed: int = 0
    skipped: int = 0
    errors: int = 0
