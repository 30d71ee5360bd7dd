"""Registration Gateway - External registration system boundary."""

from coursehub.gateway.exceptions import GatewayConnectionError, GatewayError
from coursehub.gateway.gateway import RegistrationGateway, SimulatedGateway
from coursehub.gateway.models import GatewayCredentials, RegistrationResult

__all__ = [
    "GatewayConnectionError",
    "GatewayCredentials",
    "GatewayError",
    "RegistrationGateway",
    "RegistrationResult",
    "SimulatedGateway",
]
