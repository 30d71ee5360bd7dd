"""Data models for the Registration Gateway."""

from dataclasses import dataclass, field


@dataclass
class RegistrationResult:
    """Outcome of one registration attempt.

    Attributes:
        success: Whether every section was registered.
        message: Human-readable summary, recorded on the intent on failure.
        registered_sections: Section IDs that were registered.
        failed_sections: Section IDs that were rejected.
    """

    success: bool
    message: str
    registered_sections: list[str] = field(default_factory=list)
    failed_sections: list[str] = field(default_factory=list)


@dataclass
class GatewayCredentials:
    """Portal login supplied by the user."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"GatewayCredentials(username={self.username!r}, password='***')"
