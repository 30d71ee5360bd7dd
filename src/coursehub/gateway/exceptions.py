"""Custom exceptions for the Registration Gateway."""


class GatewayError(Exception):
    """Base exception for Registration Gateway errors."""


class GatewayConnectionError(GatewayError):
    """Connecting a user to the registration system failed."""
