"""Registration Queue - Time-gated state machine over registration intents."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from coursehub.logging import sanitize_for_log
from coursehub.planner import generate_id
from coursehub.registration.exceptions import IntentNotFoundError, InvalidIntentError
from coursehub.registration.models import (
    IntentStatus,
    RegistrationIntent,
    RetryPolicy,
    TickResult,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from coursehub.gateway import RegistrationGateway
    from coursehub.planner import SelectedSection
    from coursehub.registration.store import IntentStore

logger = logging.getLogger(__name__)

INTERRUPTED_MESSAGE = "Registration attempt interrupted"
DEFAULT_FAILURE_MESSAGE = "Registration failed"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RegistrationQueue:
    """Holds registration intents and drives them through their states.

    The tick is the only writer of intent state. Each intent is advanced
    under its own lock, acquired without blocking; an intent already held by
    an overlapping sweep is skipped.
    """

    def __init__(
        self,
        store: IntentStore,
        gateway: RegistrationGateway,
        retry_policy: RetryPolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the queue.

        Args:
            store: Where intents are persisted.
            gateway: External registration system.
            retry_policy: Attempt ceiling and terminal markers.
            clock: Returns the current UTC time (injectable for tests).
        """
        self.store = store
        self.gateway = gateway
        self.retry_policy = retry_policy or RetryPolicy()
        self._clock = clock or _utcnow
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    # --- Queue operations ---

    def enqueue(
        self,
        user_id: str,
        schedule_id: str,
        sections: Sequence[SelectedSection],
        target_instant: datetime,
    ) -> RegistrationIntent:
        """Create a pending intent.

        Args:
            user_id: Owning user.
            schedule_id: Generated schedule the sections came from.
            sections: Sections to register; must not be empty.
            target_instant: When registration opens; must be timezone-aware.

        Returns:
            The new intent, in the pending state.

        Raises:
            InvalidIntentError: If any argument is missing or malformed.
        """
        if not user_id or not user_id.strip():
            raise InvalidIntentError("user_id is required")
        if not schedule_id or not schedule_id.strip():
            raise InvalidIntentError("schedule_id is required")
        if not sections:
            raise InvalidIntentError("At least one section is required")
        if target_instant.tzinfo is None or target_instant.utcoffset() is None:
            raise InvalidIntentError("target_instant must be timezone-aware")

        intent = RegistrationIntent(
            id=generate_id("intent"),
            user_id=user_id,
            schedule_id=schedule_id,
            sections=tuple(sections),
            target_instant=target_instant.astimezone(UTC),
            created_at=self._clock(),
        )
        self.store.put(intent)
        logger.info(
            "Enqueued %s for user %s: %d sections at %s",
            intent.id,
            user_id,
            len(intent.sections),
            intent.target_instant.isoformat(),
        )
        return intent

    def get(self, intent_id: str) -> RegistrationIntent:
        """Get an intent by ID.

        Raises:
            IntentNotFoundError: If no intent has this ID.
        """
        intent = self.store.get(intent_id)
        if intent is None:
            raise IntentNotFoundError(f"Registration intent '{intent_id}' not found")
        return intent

    def list_for_user(self, user_id: str) -> list[RegistrationIntent]:
        return self.store.list_for_user(user_id)

    def list_all(self) -> list[RegistrationIntent]:
        return self.store.list_all()

    def remove(self, intent_id: str) -> bool:
        """Remove an intent. Safe to call while a sweep is running.

        Returns:
            True if the intent existed.
        """
        removed = self.store.delete(intent_id)
        with self._locks_guard:
            self._locks.pop(intent_id, None)
        if removed:
            logger.info("Removed %s from registration queue", intent_id)
        return removed

    # --- Sweep ---

    def tick(self, now: datetime | None = None) -> TickResult:
        """Advance every eligible intent once.

        Args:
            now: Sweep time; defaults to the queue clock.

        Returns:
            Counts of what the sweep did.
        """
        now = now or self._clock()
        result = TickResult()

        for candidate in self.store.scan_eligible(now):
            lock = self._lock_for(candidate.id)
            if not lock.acquire(blocking=False):
                logger.debug("Skipping %s, held by another sweep", candidate.id)
                result.skipped += 1
                continue
            try:
                self._advance(candidate.id, now, result)
            except Exception:
                logger.exception("Unexpected error advancing %s", candidate.id)
                result.errors += 1
            finally:
                lock.release()

        if result.attempted or result.promoted or result.errors:
            logger.info(
                "Sweep done: %d promoted, %d attempted, %d succeeded, %d retried, %d failed",
                result.promoted,
                result.attempted,
                result.succeeded,
                result.retried,
                result.failed,
            )
        return result

    def _lock_for(self, intent_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(intent_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[intent_id] = lock
            return lock

    def _advance(self, intent_id: str, now: datetime, result: TickResult) -> None:
        """Apply this sweep's transitions to one intent. Caller holds its lock."""
        intent = self.store.get(intent_id)
        if intent is None or intent.is_terminal or now < intent.target_instant:
            return

        if intent.status == IntentStatus.REGISTERING:
            # Left over from a sweep that never finished
            logger.warning("Recovering interrupted attempt for %s", intent.id)
            self._record_failure(intent, INTERRUPTED_MESSAGE, result)
            return

        if intent.status == IntentStatus.PENDING:
            intent = replace(intent, status=IntentStatus.QUEUED)
            if not self._save(intent):
                return
            result.promoted += 1
            logger.info("Promoted %s to queued", intent.id)

        if not self.gateway.is_connected(intent.user_id):
            logger.debug("User %s not connected, %s stays queued", intent.user_id, intent.id)
            return

        intent = replace(
            intent,
            status=IntentStatus.REGISTERING,
            attempts=intent.attempts + 1,
            last_attempt_at=now,
        )
        if not self._save(intent):
            return
        result.attempted += 1
        logger.info("Attempting registration for %s (attempt %d)", intent.id, intent.attempts)

        success, message = self._attempt(intent)
        if success:
            if self._save(replace(intent, status=IntentStatus.SUCCESS)):
                result.succeeded += 1
                logger.info("Registered %s: %s", intent.id, message)
            return

        self._record_failure(intent, message, result)

    def _attempt(self, intent: RegistrationIntent) -> tuple[bool, str]:
        """Call the gateway. Exceptions count as a failed attempt."""
        try:
            outcome = self.gateway.register(intent.user_id, intent.sections)
        except Exception as e:  # noqa: BLE001
            logger.warning("Gateway error for %s: %s", intent.id, sanitize_for_log(str(e)))
            return False, str(e) or DEFAULT_FAILURE_MESSAGE

        if outcome.success:
            return True, outcome.message
        logger.warning("Registration rejected for %s: %s", intent.id, outcome.message)
        return False, outcome.message or DEFAULT_FAILURE_MESSAGE

    def _record_failure(self, intent: RegistrationIntent, message: str, result: TickResult) -> None:
        if self.retry_policy.should_retry(intent.attempts, message):
            if self._save(replace(intent, status=IntentStatus.QUEUED, last_error=message)):
                result.retried += 1
                logger.info(
                    "Requeued %s after attempt %d/%d",
                    intent.id,
                    intent.attempts,
                    self.retry_policy.max_attempts,
                )
            return

        if self._save(replace(intent, status=IntentStatus.FAILED, last_error=message)):
            result.failed += 1
            logger.info("Registration failed for %s after %d attempts", intent.id, intent.attempts)

    def _save(self, intent: RegistrationIntent) -> bool:
        """Write an intent back unless it was removed meanwhile."""
        if self.store.get(intent.id) is None:
            logger.info("%s was removed during the sweep, dropping update", intent.id)
            return False
        self.store.put(intent)
        return True
