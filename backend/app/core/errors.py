"""
Application error taxonomy.

Repositories and dependencies raise these; the API layer maps each one
onto the `{success: false, error, details?}` envelope using `status_code`.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base exception for all expected application failures."""

    status_code: int = 500

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(AppError):
    """Caller-supplied data rejected before reaching the store."""

    status_code = 400


class AuthenticationError(AppError):
    """Credential present but invalid, expired, or bound to an inactive user."""

    status_code = 403


class MissingCredentialsError(AuthenticationError):
    """No bearer credential on a protected route."""

    status_code = 401


class InvalidCredentialsError(AuthenticationError):
    """Email/password pair did not match."""

    status_code = 401


class AuthorizationError(AppError):
    """Authenticated user lacks the required role."""

    status_code = 403


class NotFoundError(AppError):
    """Zero rows matched."""

    status_code = 404


class ConflictError(AppError):
    """Write rejected by a uniqueness constraint."""

    status_code = 409


class DuplicateKeyError(ConflictError):
    """The business key is already taken by another row."""


class StoreError(AppError):
    """Unexpected failure from the persistence layer."""

    status_code = 500
