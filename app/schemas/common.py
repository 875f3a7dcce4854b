"""Common/shared response schemas."""
from pydantic import BaseModel
from typing import Any, Optional


class SuccessResponse(BaseModel):
    success: bool = True
    data: Optional[Any] = None


class ErrorResponse(BaseModel):
    detail: str
    code: Optional[str] = None
    field: Optional[str] = None


ERROR_RESPONSES = {
    403: {"model": ErrorResponse, "description": "Permission denied (NoRole, WrongRole, ApprovalPending)"},
    404: {"model": ErrorResponse, "description": "Record not found"},
    409: {"model": ErrorResponse, "description": "InvalidTransition, AlreadySubmitted or Conflict"},
    422: {"model": ErrorResponse, "description": "Invalid input"},
}
