"""Service layer package."""

__all__ = [
    "auth_service",
    "role_service",
    "doctor_service",
    "patient_service",
    "kyc_service",
    "audit_service",
    "authorization_service",
]
