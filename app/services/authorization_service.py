"""Single decision point for protected operations.

Every call re-resolves role and doctor approval from the database.
Decisions are never cached across requests.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional
from sqlalchemy.orm import Session
from app.core.constants import DenialReason, UserRole
from app.services.doctor_service import DoctorService
from app.services.role_service import RoleService
from app.utils.errors import AuthorizationError

logger = logging.getLogger(__name__)


class Action(str, Enum):
    # patient-protected
    BOOK_APPOINTMENT = "book_appointment"
    VIEW_PATIENT_DASHBOARD = "view_patient_dashboard"
    # doctor-protected
    VIEW_DOCTOR_DASHBOARD = "view_doctor_dashboard"
    MANAGE_APPOINTMENTS = "manage_appointments"
    WRITE_MEDICAL_RECORD = "write_medical_record"
    # admin-protected
    VIEW_ADMIN_DASHBOARD = "view_admin_dashboard"
    APPROVE_DOCTORS = "approve_doctors"
    PROCESS_KYC = "process_kyc"
    VIEW_KYC_AUDIT = "view_kyc_audit"

    @property
    def required_role(self) -> UserRole:
        return ACTION_ROLES[self]


ACTION_ROLES = {
    Action.BOOK_APPOINTMENT: UserRole.PATIENT,
    Action.VIEW_PATIENT_DASHBOARD: UserRole.PATIENT,
    Action.VIEW_DOCTOR_DASHBOARD: UserRole.DOCTOR,
    Action.MANAGE_APPOINTMENTS: UserRole.DOCTOR,
    Action.WRITE_MEDICAL_RECORD: UserRole.DOCTOR,
    Action.VIEW_ADMIN_DASHBOARD: UserRole.ADMIN,
    Action.APPROVE_DOCTORS: UserRole.ADMIN,
    Action.PROCESS_KYC: UserRole.ADMIN,
    Action.VIEW_KYC_AUDIT: UserRole.ADMIN,
}

_unmapped = set(Action) - set(ACTION_ROLES)
if _unmapped:
    raise RuntimeError(f"Actions without a required role: {sorted(a.value for a in _unmapped)}")


@dataclass(frozen=True)
class AuthorizationDecision:
    allowed: bool
    reason: Optional[DenialReason] = None
    role: Optional[UserRole] = None

    @classmethod
    def allow(cls, role: UserRole) -> "AuthorizationDecision":
        return cls(allowed=True, role=role)

    @classmethod
    def deny(cls, reason: DenialReason, role: Optional[UserRole] = None) -> "AuthorizationDecision":
        return cls(allowed=False, reason=reason, role=role)


class AuthorizationService:
    @staticmethod
    def authorize(db: Session, principal_id, action: Action) -> AuthorizationDecision:
        role = RoleService.resolve_role_or_none(db, principal_id)
        if role is None:
            return AuthorizationDecision.deny(DenialReason.NO_ROLE)
        if role != action.required_role:
            return AuthorizationDecision.deny(DenialReason.WRONG_ROLE, role)

        if role == UserRole.DOCTOR:
            if not DoctorService.is_user_approved(db, principal_id):
                return AuthorizationDecision.deny(DenialReason.APPROVAL_PENDING, role)
            return AuthorizationDecision.allow(role)
        elif role == UserRole.PATIENT:
            return AuthorizationDecision.allow(role)
        elif role == UserRole.ADMIN:
            return AuthorizationDecision.allow(role)
        raise ValueError(f"Unhandled role: {role!r}")

    @staticmethod
    def require(db: Session, principal_id, action: Action) -> UserRole:
        """Raise ``AuthorizationError`` unless ``principal_id`` may perform ``action``."""
        decision = AuthorizationService.authorize(db, principal_id, action)
        if not decision.allowed:
            logger.warning("Denied %s to principal %s: %s", action.value, principal_id, decision.reason.value)
            raise AuthorizationError(decision.reason)
        return decision.role

    @staticmethod
    def permissions(db: Session, principal_id) -> dict[str, AuthorizationDecision]:
        return {action.value: AuthorizationService.authorize(db, principal_id, action) for action in Action}
