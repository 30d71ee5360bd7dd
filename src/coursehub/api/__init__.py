"""REST API for CourseHub."""

from coursehub.api.app import app, create_app
from coursehub.api.models import (
    APIResponse,
    CourseResponse,
    IntentResponse,
    ScheduleResponse,
)

__all__ = [
    "APIResponse",
    "CourseResponse",
    "IntentResponse",
    "ScheduleResponse",
    "app",
    "create_app",
]
