"""Registration Gateway - Connection to the external registration system."""

from __future__ import annotations

import logging
import random
import threading
from typing import TYPE_CHECKING, Protocol

from coursehub.gateway.exceptions import GatewayConnectionError
from coursehub.gateway.models import RegistrationResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from coursehub.gateway.models import GatewayCredentials
    from coursehub.planner import SelectedSection

logger = logging.getLogger(__name__)

NOT_CONNECTED_MESSAGE = (
    "Not connected to the registration system. Please connect your account first."
)


class RegistrationGateway(Protocol):
    """Interface the registration queue uses to enroll a user."""

    def is_connected(self, user_id: str) -> bool:
        """Whether the user has a live connection to the registration system."""
        ...

    def register(self, user_id: str, sections: Sequence[SelectedSection]) -> RegistrationResult:
        """Attempt to register the user for all sections.

        May raise to signal a transport failure.
        """
        ...


class SimulatedGateway:
    """Demo-mode registration system.

    Any non-empty username/password connects. Each section registers with
    probability ``1 - failure_rate``; one rejected section fails the attempt.
    """

    def __init__(self, failure_rate: float = 0.1, rng: random.Random | None = None) -> None:
        """Initialize the simulated gateway.

        Args:
            failure_rate: Probability that any single section is rejected.
            rng: Random source (seed it for reproducible runs).
        """
        if not 0.0 <= failure_rate <= 1.0:
            raise ValueError("failure_rate must be between 0 and 1")
        self.failure_rate = failure_rate
        self._rng = rng or random.Random()
        self._connections: set[str] = set()
        self._lock = threading.Lock()

    def connect(self, user_id: str, credentials: GatewayCredentials) -> bool:
        """Connect a user.

        Returns:
            True if connected; False if credentials are blank.
        """
        if not credentials.username or not credentials.password:
            logger.info("Rejected blank credentials for user %s", user_id)
            return False
        with self._lock:
            self._connections.add(user_id)
        logger.info("Simulated registration connection established for user %s", user_id)
        return True

    def require_connection(self, user_id: str, credentials: GatewayCredentials) -> None:
        """Connect a user or raise.

        Raises:
            GatewayConnectionError: If the credentials are rejected.
        """
        if not self.connect(user_id, credentials):
            raise GatewayConnectionError("Username and password are required")

    def disconnect(self, user_id: str) -> None:
        with self._lock:
            self._connections.discard(user_id)
        logger.info("Disconnected user %s from registration system", user_id)

    def is_connected(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._connections

    def register(self, user_id: str, sections: Sequence[SelectedSection]) -> RegistrationResult:
        if not self.is_connected(user_id):
            return RegistrationResult(success=False, message=NOT_CONNECTED_MESSAGE)

        registered: list[str] = []
        failed: list[str] = []
        with self._lock:
            for section in sections:
                if self._rng.random() >= self.failure_rate:
                    registered.append(section.section_id)
                else:
                    failed.append(section.section_id)

        if not failed:
            return RegistrationResult(
                success=True,
                message=f"Successfully registered for {len(registered)} section(s)",
                registered_sections=registered,
            )
        return RegistrationResult(
            success=False,
            message=(
                f"Registered for {len(registered)} section(s), but {len(failed)} failed"
            ),
            registered_sections=registered,
            failed_sections=failed,
        )
