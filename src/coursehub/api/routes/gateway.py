"""Registration system connection endpoints."""

from fastapi import APIRouter

from coursehub.api.dependencies import GatewayDep, UserIdDep
from coursehub.api.models import APIResponse, GatewayConnectRequest, GatewayStatusResponse
from coursehub.gateway import GatewayCredentials

router = APIRouter(prefix="/gateway", tags=["gateway"])


@router.post("/connect", response_model=APIResponse[GatewayStatusResponse])
def connect(
    body: GatewayConnectRequest,
    gateway: GatewayDep,
    user_id: UserIdDep,
) -> APIResponse[GatewayStatusResponse]:
    """Connect the caller to the registration system (demo mode)."""
    gateway.require_connection(
        user_id, GatewayCredentials(username=body.username, password=body.password)
    )
    return APIResponse(
        data=GatewayStatusResponse(
            connected=True,
            message="Connected to the registration system (demo mode)",
        )
    )


@router.get("/status", response_model=APIResponse[GatewayStatusResponse])
def connection_status(
    gateway: GatewayDep, user_id: UserIdDep
) -> APIResponse[GatewayStatusResponse]:
    """Report whether the caller is connected."""
    return APIResponse(data=GatewayStatusResponse(connected=gateway.is_connected(user_id)))


@router.post("/disconnect", response_model=APIResponse[GatewayStatusResponse])
def disconnect(gateway: GatewayDep, user_id: UserIdDep) -> APIResponse[GatewayStatusResponse]:
    """Disconnect the caller from the registration system."""
    gateway.disconnect(user_id)
    return APIResponse(
        data=GatewayStatusResponse(
            connected=False,
            message="Disconnected from the registration system",
        )
    )
