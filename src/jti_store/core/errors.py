"""Errors raised at the JTI store boundary.

Callers reject the assertion on any of these. ``JTIConflictError`` is kept
apart so the authentication flow can report a replay instead of a generic
failure.
"""

from __future__ import annotations

INVALID_REQUEST = "invalid_request"


class JTIStoreError(RuntimeError):
    """Base exception for JTI store failures.

    Attributes:
        jti: The identifier the failing call was made for, if any.
        error_code: OAuth2 error code the authentication flow should return.
    """

    error_code: str = INVALID_REQUEST

    def __init__(self, message: str, *, jti: str | None = None) -> None:
        super().__init__(message)
        self.jti = jti


class JTIValidationError(JTIStoreError):
    """Raised when the state of a JTI cannot be checked or recorded."""

    def __init__(self, jti: str | None) -> None:
        super().__init__(
            f"Error occurred while validating the JTI: {jti} of the assertion.",
            jti=jti,
        )


class JTIConflictError(JTIStoreError):
    """Raised when a strict-mode insert finds the JTI already recorded."""

    def __init__(self, jti: str) -> None:
        super().__init__(f"JWT Token with JTI: {jti} has been replayed.", jti=jti)


class DialectConfigurationError(JTIStoreError):
    """Raised when the database engine is undetectable or not allowed."""
