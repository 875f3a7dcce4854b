"""Global error handlers for the application.

Storage and driver errors are answered with a generic body; only the
exception class name is logged so schema details never leave the service.
Malformed request bodies are reported by field, never echoing the input.
"""
import logging
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from app.core.constants import ValidationErrorCode
from app.utils.errors import DomainError

logger = logging.getLogger(__name__)

FIELD_CODES = {
    "document_type": ValidationErrorCode.INVALID_DOCUMENT_TYPE,
    "document_number": ValidationErrorCode.INVALID_DOCUMENT_NUMBER,
    "full_name": ValidationErrorCode.INVALID_FULL_NAME,
    "date_of_birth": ValidationErrorCode.INVALID_DATE_OF_BIRTH,
    "reason": ValidationErrorCode.INVALID_REJECTION_REASON,
    "role": ValidationErrorCode.INVALID_REGISTRATION,
}


async def http_exception_handler(request: Request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def domain_error_handler(request: Request, exc: DomainError):
    content = {"detail": exc.detail, "code": exc.code}
    field = getattr(exc, "field", None)
    if field:
        content["field"] = field
    return JSONResponse(status_code=exc.status_code, content=content)


async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Storage error on %s %s: %s", request.method, request.url.path, type(exc).__name__)
    return JSONResponse(
        status_code=500,
        content={"detail": "Unable to complete request", "code": "StorageError"},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    # loc is ("body" | "query" | "path", field, ...)
    loc = [str(part) for part in first.get("loc", ())[1:]]
    field = loc[0] if loc else None
    code = FIELD_CODES.get(field, ValidationErrorCode.INVALID_REQUEST)
    content = {"detail": first.get("msg", "Invalid request"), "code": code.value}
    if field:
        content["field"] = ".".join(loc)
    return JSONResponse(status_code=422, content=content)
