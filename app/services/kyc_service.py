"""KYC verification pipeline.

A principal submits at most one document; it starts ``pending`` and an
admin moves it once to ``verified`` or ``rejected``. Rejection is final:
there is no resubmission path. Every decision is written to the
hash-chained audit trail in the same transaction as the state change.
"""
import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.config import settings
from app.core.constants import (
    AuditOutcome,
    DenialReason,
    KycAuditAction,
    KycStatus,
    StateErrorCode,
    UserRole,
)
from app.models.kyc import KycDocument
from app.models.user import User
from app.services.audit_service import KycAuditService
from app.services.role_service import RoleService
from app.utils.errors import AuthorizationError, NotFoundError, StateError
from app.utils.helpers import utcnow
from app.utils.validators import mask_document_number, validate_kyc_fields, validate_rejection_reason

logger = logging.getLogger(__name__)


def _serialize(doc: KycDocument, masked: bool) -> dict:
    return {
        "id": doc.id,
        "user_id": doc.user_id,
        "document_type": doc.document_type,
        "document_number": mask_document_number(doc.document_number) if masked else doc.document_number,
        "full_name": doc.full_name,
        "date_of_birth": doc.date_of_birth,
        "verification_status": doc.verification_status,
        "rejection_reason": doc.rejection_reason,
        "verified_by": doc.verified_by,
        "verified_at": doc.verified_at,
        "created_at": doc.created_at,
    }


class KycService:
    @staticmethod
    def get_by_id(db: Session, kyc_id: int) -> Optional[KycDocument]:
        return db.query(KycDocument).filter(KycDocument.id == kyc_id).first()

    @staticmethod
    def submit(
        db: Session,
        principal_id: int,
        document_type,
        document_number,
        full_name,
        date_of_birth,
    ) -> KycDocument:
        RoleService.resolve_role(db, principal_id)
        fields = validate_kyc_fields(document_type, document_number, full_name, date_of_birth)

        existing = db.query(KycDocument.id).filter(KycDocument.user_id == int(principal_id)).first()
        if existing:
            raise StateError(StateErrorCode.ALREADY_SUBMITTED)

        doc = KycDocument(
            user_id=int(principal_id),
            document_type=fields.document_type.value,
            document_number=fields.document_number,
            full_name=fields.full_name,
            date_of_birth=fields.date_of_birth,
            verification_status=KycStatus.PENDING.value,
        )
        db.add(doc)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent submission for the same principal
            db.rollback()
            logger.warning("Concurrent KYC submission rejected for principal %s", principal_id)
            raise StateError(StateErrorCode.ALREADY_SUBMITTED)
        db.refresh(doc)
        logger.info("KYC document %s submitted by principal %s", doc.id, principal_id)
        return doc

    @staticmethod
    def get_status(db: Session, principal_id: int, caller_id: int) -> Optional[dict]:
        """Current document for ``principal_id`` or None.

        The owner sees a masked document number; admins see it in full.
        Anyone else is refused.
        """
        caller_role = RoleService.resolve_role(db, caller_id)
        is_admin = caller_role == UserRole.ADMIN
        if not is_admin and int(caller_id) != int(principal_id):
            raise AuthorizationError(DenialReason.WRONG_ROLE)

        doc = db.query(KycDocument).filter(KycDocument.user_id == int(principal_id)).first()
        if doc is None:
            return None
        return _serialize(doc, masked=not is_admin)

    @staticmethod
    def list_pending(db: Session, acting_admin_id: int) -> list[dict]:
        RoleService.require_role(db, acting_admin_id, UserRole.ADMIN)
        rows = (
            db.query(KycDocument, User.email)
            .join(User, User.id == KycDocument.user_id)
            .filter(KycDocument.verification_status == KycStatus.PENDING.value)
            .order_by(KycDocument.created_at, KycDocument.id)
            .all()
        )
        return [{**_serialize(doc, masked=False), "user_email": email} for doc, email in rows]

    @staticmethod
    def verify(db: Session, kyc_id: int, acting_admin_id: int) -> KycDocument:
        RoleService.require_role(db, acting_admin_id, UserRole.ADMIN)
        now = utcnow()
        return KycService._transition(
            db,
            kyc_id,
            acting_admin_id,
            KycAuditAction.VERIFY,
            {
                KycDocument.verification_status: KycStatus.VERIFIED.value,
                KycDocument.verified_by: int(acting_admin_id),
                KycDocument.verified_at: now,
                KycDocument.updated_at: now,
            },
        )

    @staticmethod
    def reject(db: Session, kyc_id: int, acting_admin_id: int, reason: Optional[str]) -> KycDocument:
        RoleService.require_role(db, acting_admin_id, UserRole.ADMIN)
        reason = validate_rejection_reason(reason, settings.KYC_REJECTION_REASON_MAX_LENGTH)
        now = utcnow()
        return KycService._transition(
            db,
            kyc_id,
            acting_admin_id,
            KycAuditAction.REJECT,
            {
                KycDocument.verification_status: KycStatus.REJECTED.value,
                KycDocument.rejection_reason: reason,
                KycDocument.verified_by: int(acting_admin_id),
                KycDocument.verified_at: now,
                KycDocument.updated_at: now,
            },
            reason=reason,
        )

    @staticmethod
    def audit_trail(db: Session, kyc_id: int, acting_admin_id: int) -> dict:
        RoleService.require_role(db, acting_admin_id, UserRole.ADMIN)
        if not KycService.get_by_id(db, kyc_id):
            raise NotFoundError("KYC document not found")
        return {
            "kyc_document_id": kyc_id,
            "entries": KycAuditService.list_entries(db, kyc_id),
            "chain": KycAuditService.verify_chain(db, kyc_id),
        }

    @staticmethod
    def _transition(
        db: Session,
        kyc_id: int,
        acting_admin_id: int,
        action: KycAuditAction,
        values: dict,
        reason: Optional[str] = None,
    ) -> KycDocument:
        doc = KycService.get_by_id(db, kyc_id)
        if not doc:
            raise NotFoundError("KYC document not found")

        if doc.verification_status != KycStatus.PENDING.value:
            KycService._record_failed_attempt(db, kyc_id, acting_admin_id, action, AuditOutcome.INVALID_TRANSITION, reason)
            raise StateError(StateErrorCode.INVALID_TRANSITION)

        updated = (
            db.query(KycDocument)
            .filter(
                KycDocument.id == kyc_id,
                KycDocument.verification_status == KycStatus.PENDING.value,
            )
            .update(values, synchronize_session=False)
        )
        if updated != 1:
            db.rollback()
            logger.warning("KYC document %s changed concurrently; %s lost", kyc_id, action.value)
            KycService._record_failed_attempt(db, kyc_id, acting_admin_id, action, AuditOutcome.CONFLICT, reason)
            raise StateError(StateErrorCode.CONFLICT)

        KycAuditService.append(db, kyc_id, acting_admin_id, action, AuditOutcome.SUCCESS, reason)
        db.commit()
        db.refresh(doc)
        logger.info("KYC document %s %s by admin %s", kyc_id, doc.verification_status, acting_admin_id)
        return doc

    @staticmethod
    def _record_failed_attempt(
        db: Session,
        kyc_id: int,
        acting_admin_id: int,
        action: KycAuditAction,
        outcome: AuditOutcome,
        reason: Optional[str],
    ) -> None:
        logger.warning("KYC %s on document %s by admin %s refused: %s", action.value, kyc_id, acting_admin_id, outcome.value)
        if not settings.KYC_AUDIT_FAILED_ATTEMPTS:
            return
        KycAuditService.append(db, kyc_id, acting_admin_id, action, outcome, reason)
        db.commit()
