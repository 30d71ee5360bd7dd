"""FastAPI dependencies for dependency injection."""

from __future__ import annotations

from collections.abc import Generator  # noqa: TC003
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from coursehub.catalog import CourseCatalog
from coursehub.gateway import SimulatedGateway
from coursehub.planner import PresetRegistry, ScheduleAssembler
from coursehub.registration import RegistrationQueue
from coursehub.services import Services

# Global Services instance (initialized on app startup)
_services: Services | None = None


def init_services(services: Services) -> Services:
    """Initialize the global Services instance."""
    global _services  # noqa: PLW0603
    _services = services
    return _services


def close_services() -> None:
    """Close the global Services instance."""
    global _services  # noqa: PLW0603
    if _services is not None:
        _services.close()
        _services = None


def _require_services() -> Services:
    if _services is None:
        raise RuntimeError("Services not initialized. Call init_services() first.")
    return _services


def get_catalog() -> Generator[CourseCatalog, None, None]:
    """Dependency that provides the CourseCatalog."""
    yield _require_services().catalog


def get_presets() -> Generator[PresetRegistry, None, None]:
    """Dependency that provides the PresetRegistry."""
    yield _require_services().presets


def get_assembler() -> Generator[ScheduleAssembler, None, None]:
    """Dependency that provides the ScheduleAssembler."""
    yield _require_services().assembler


def get_queue() -> Generator[RegistrationQueue, None, None]:
    """Dependency that provides the RegistrationQueue."""
    yield _require_services().queue


def get_gateway() -> Generator[SimulatedGateway, None, None]:
    """Dependency that provides the registration gateway."""
    yield _require_services().gateway


def get_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str:
    """Dependency that reads the caller's user ID from the X-User-Id header."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header is required",
        )
    return x_user_id.strip()


def get_optional_user_id(x_user_id: Annotated[str | None, Header()] = None) -> str | None:
    """Dependency that reads X-User-Id when present, for endpoints open to everyone."""
    if x_user_id is None or not x_user_id.strip():
        return None
    return x_user_id.strip()


# Type aliases for dependency injection
CatalogDep = Annotated[CourseCatalog, Depends(get_catalog)]
PresetsDep = Annotated[PresetRegistry, Depends(get_presets)]
AssemblerDep = Annotated[ScheduleAssembler, Depends(get_assembler)]
QueueDep = Annotated[RegistrationQueue, Depends(get_queue)]
GatewayDep = Annotated[SimulatedGateway, Depends(get_gateway)]
UserIdDep = Annotated[str, Depends(get_user_id)]
OptionalUserIdDep = Annotated[str | None, Depends(get_optional_user_id)]
