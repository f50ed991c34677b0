"""
Domain exceptions raised by the service layer.

Routes translate these into HTTP responses; services never raise HTTPException.
"""
from typing import List, Optional


class PortalError(Exception):
    """Base class for portal domain errors."""


class NotFoundError(PortalError):
    pass


class ConflictError(PortalError):
    pass


class ValidationFailed(PortalError):
    """Input is well-formed but violates a business rule."""

    def __init__(self, message: str, missing: Optional[List[str]] = None):
        super().__init__(message)
        self.missing = missing or []


class AuthMethodMismatchError(PortalError):
    """An email is already registered with a different sign-in method."""

    def __init__(self, expected: str, got: str):
        self.expected = expected
        self.got = got
        super().__init__(f"auth method mismatch: expected {expected}, got {got}")

    @property
    def user_message(self) -> str:
        if self.expected == "passwordless":
            return "This email is registered with magic link sign-in. Please use the email option instead."
        return "This email is registered with Google. Please use the Google sign-in option instead."


class IdentityInitError(PortalError):
    """The identity provider could not be initialized. Fatal at boot."""
