from fastapi import FastAPI
from fastapi.exceptions import HTTPException as FastAPIHTTPException
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.core.logger import setup_logging
from app.middleware.cors import configure_cors
from app.middleware.logging import RequestLoggerMiddleware
from app.middleware import error_handler
from app.utils.errors import DomainError

# Routers
from app.routers import auth as auth_router
from app.routers import users as users_router
from app.routers import doctors as doctors_router
from app.routers import patients as patients_router
from app.routers import kyc as kyc_router
from app.routers import admin as admin_router
from app.routers import health as health_router


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""
    setup_logging()
    description = (
        "MedTrust Backend API.\n\n"
        "Role resolution, doctor approval and KYC identity verification for the "
        "healthcare appointment platform."
    )

    openapi_tags = [
        {"name": "authentication", "description": "Register, login and logout."},
        {"name": "users", "description": "Current principal, resolved role and permissions."},
        {"name": "doctors", "description": "Doctor profiles and approval status."},
        {"name": "patients", "description": "Patient profiles."},
        {"name": "kyc", "description": "Identity document submission and status."},
        {"name": "admin", "description": "Doctor approvals, KYC decisions and audit trail."},
        {"name": "health", "description": "Health checks and service status endpoints."},
    ]

    app = FastAPI(
        title="MedTrust Backend API",
        version="0.1.0",
        description=description,
        openapi_tags=openapi_tags,
    )

    # Middleware
    configure_cors(app)
    app.add_middleware(RequestLoggerMiddleware)

    # Exception handlers
    app.add_exception_handler(FastAPIHTTPException, error_handler.http_exception_handler)
    app.add_exception_handler(DomainError, error_handler.domain_error_handler)
    app.add_exception_handler(RequestValidationError, error_handler.request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, error_handler.storage_error_handler)

    # Include routers
    app.include_router(health_router.router)
    app.include_router(auth_router.router)
    app.include_router(users_router.router)
    app.include_router(doctors_router.router)
    app.include_router(patients_router.router)
    app.include_router(kyc_router.router)
    app.include_router(admin_router.router)

    return app


app = create_app()
