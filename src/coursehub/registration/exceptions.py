"""Custom exceptions for the Registration Queue."""


class RegistrationError(Exception):
    """Base exception for Registration Queue errors."""


class IntentNotFoundError(RegistrationError):
    """Registration intent with given ID does not exist."""


class InvalidIntentError(RegistrationError):
    """Registration intent input is invalid."""
