"""Custom error definitions for API exceptions.

Domain errors carry a machine-readable ``code`` drawn from a closed set so
the boundary layer can render the right message without re-deriving policy.
Authorization and state errors expose only a generic detail.
"""
from fastapi import HTTPException
from starlette import status

from app.core.constants import DenialReason, StateErrorCode, ValidationErrorCode

PERMISSION_DENIED_MESSAGE = "You do not have permission to perform this action"
STATE_ERROR_MESSAGE = "Action could not be completed, please retry or contact support"


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class InvalidCredentialsError(HTTPException):
    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class UserAlreadyExistsError(HTTPException):
    def __init__(self, detail: str = "User already exists"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class DomainError(HTTPException):
    """Base for errors that cross the boundary with a ``code``."""

    code: str = "Error"

    def __init__(self, status_code: int, code: str, detail: str):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code


class ValidationError(DomainError):
    """Malformed input; field-level detail is safe to show the submitter."""

    def __init__(self, code: ValidationErrorCode, field: str, detail: str):
        super().__init__(status.HTTP_422_UNPROCESSABLE_ENTITY, code.value, detail)
        self.field = field


class AuthorizationError(DomainError):
    def __init__(self, reason: DenialReason):
        super().__init__(status.HTTP_403_FORBIDDEN, reason.value, PERMISSION_DENIED_MESSAGE)
        self.reason = reason


class StateError(DomainError):
    def __init__(self, code: StateErrorCode):
        super().__init__(status.HTTP_409_CONFLICT, code.value, STATE_ERROR_MESSAGE)


class NotFoundError(DomainError):
    def __init__(self, detail: str = "Record not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, "NotFound", detail)
