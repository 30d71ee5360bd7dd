"""Registration Queue - Durable intents, time-gated promotion and retrying attempts."""

from coursehub.registration.database import Database
from coursehub.registration.exceptions import (
    IntentNotFoundError,
    InvalidIntentError,
    RegistrationError,
)
from coursehub.registration.models import (
    IntentStatus,
    RegistrationIntent,
    RetryPolicy,
    TickResult,
)
from coursehub.registration.queue import RegistrationQueue
from coursehub.registration.runner import QueueRunner
from coursehub.registration.store import InMemoryIntentStore, IntentStore, SqlIntentStore

__all__ = [
    "Database",
    "InMemoryIntentStore",
    "IntentNotFoundError",
    "IntentStatus",
    "IntentStore",
    "InvalidIntentError",
    "QueueRunner",
    "RegistrationError",
    "RegistrationIntent",
    "RegistrationQueue",
    "RetryPolicy",
    "SqlIntentStore",
    "TickResult",
]
