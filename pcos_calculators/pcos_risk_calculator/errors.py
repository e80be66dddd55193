"""Exceptions raised around the PCOS risk calculator.

The scoring engine itself never raises; these cover intake validation,
preset lookup and the account surface.
"""

from __future__ import annotations


class PCOSError(Exception):
    """Base class for errors with a user-facing message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class IntakeValidationError(PCOSError, ValueError):
    """One or more intake fields are outside their accepted range.

    Attributes:
        errors: Mapping of field name to message, in field order
    """

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        summary = "; ".join(f"{field}: {msg}" for field, msg in self.errors.items())
        super().__init__(summary or "Invalid profile")


class UnknownPresetError(PCOSError, KeyError):
    def __init__(self, name: str, available: list[str]):
        self.name = name
        self.available = available
        super().__init__(f"Unknown demo profile '{name}'. Choose one of: {', '.join(available)}")

    def __str__(self) -> str:
        return self.message


class AuthError(PCOSError):
    """Base class for account errors."""


class MissingFieldError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class EmailAlreadyRegisteredError(AuthError):
    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class PasswordMismatchError(AuthError):
    def __init__(self, message: str = "Passwords do not match"):
        super().__init__(message)


class NotAuthenticatedError(AuthError):
    def __init__(self, message: str = "Please sign in first"):
        super().__init__(message)
