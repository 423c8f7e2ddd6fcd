"""Error taxonomy shared by the account store, the auth flows and the HTTP layer."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    CONFLICT = "conflict"
    BACKEND = "backend"


class AuthError(Exception):
    """Base error carrying a client-facing message and its kind."""

    kind = ErrorKind.BACKEND

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class ValidationError(AuthError):
    """Missing or malformed input."""

    kind = ErrorKind.VALIDATION


class AuthorizationError(AuthError):
    """Bad credentials or a rejected wallet signature."""

    kind = ErrorKind.AUTHORIZATION


class ConflictError(AuthError):
    """An identifier is already attached to a different account."""

    kind = ErrorKind.CONFLICT


class BackendError(AuthError):
    """Anything the account store or hasher raised that is not classified."""

    kind = ErrorKind.BACKEND
