import logging
from sqlalchemy.orm import Session
from app.core.constants import DoctorApprovalStatus, StateErrorCode, UserRole
from app.models.doctor import Doctor
from app.models.audit import AdminActivityLog
from app.models.user import User
from app.services.role_service import RoleService
from app.utils.errors import NotFoundError, StateError
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)


class DoctorService:
    @staticmethod
    def get_by_id(db: Session, doctor_id: int) -> Doctor:
        return db.query(Doctor).filter(Doctor.id == doctor_id).first()

    @staticmethod
    def ensure_doctor(db: Session, user_id: int) -> Doctor:
        doctor = db.query(Doctor).filter(Doctor.user_id == int(user_id)).first()
        if not doctor:
            raise NotFoundError("Doctor profile not found")
        return doctor

    @staticmethod
    def is_approved(db: Session, doctor_id: int) -> bool:
        status = db.query(Doctor.approval_status).filter(Doctor.id == doctor_id).scalar()
        if status is None:
            raise NotFoundError("Doctor not found")
        return status == DoctorApprovalStatus.APPROVED.value

    @staticmethod
    def is_user_approved(db: Session, user_id: int) -> bool:
        """Approval for a doctor principal; False when no profile exists."""
        status = db.query(Doctor.approval_status).filter(Doctor.user_id == int(user_id)).scalar()
        return status == DoctorApprovalStatus.APPROVED.value

    @staticmethod
    def list_pending(db: Session, acting_admin_id: int) -> list[dict]:
        RoleService.require_role(db, acting_admin_id, UserRole.ADMIN)
        rows = (
            db.query(Doctor, User)
            .join(User, User.id == Doctor.user_id)
            .filter(Doctor.approval_status == DoctorApprovalStatus.PENDING.value)
            .order_by(Doctor.created_at, Doctor.id)
            .all()
        )
        return [
            {
                "id": doctor.id,
                "user_id": doctor.user_id,
                "full_name": user.full_name,
                "email": user.email,
                "specialization": doctor.specialization,
                "license_number": doctor.license_number,
                "years_of_experience": doctor.years_of_experience,
                "bio": doctor.bio,
                "created_at": doctor.created_at,
            }
            for doctor, user in rows
        ]

    @staticmethod
    def approve_doctor(db: Session, doctor_id: int, acting_admin_id: int, notes: str | None = None) -> Doctor:
        return DoctorService._decide(db, doctor_id, acting_admin_id, DoctorApprovalStatus.APPROVED, notes)

    @staticmethod
    def reject_doctor(db: Session, doctor_id: int, acting_admin_id: int, reason: str | None = None) -> Doctor:
        return DoctorService._decide(db, doctor_id, acting_admin_id, DoctorApprovalStatus.REJECTED, reason)

    @staticmethod
    def _decide(
        db: Session,
        doctor_id: int,
        acting_admin_id: int,
        target: DoctorApprovalStatus,
        notes: str | None,
    ) -> Doctor:
        RoleService.require_role(db, acting_admin_id, UserRole.ADMIN)

        doctor = DoctorService.get_by_id(db, doctor_id)
        if not doctor:
            raise NotFoundError("Doctor not found")

        # Repeating the same decision is a no-op so retries are safe
        if doctor.approval_status == target.value:
            logger.info("Doctor %s already %s; nothing to do", doctor_id, target.value)
            return doctor
        if doctor.approval_status != DoctorApprovalStatus.PENDING.value:
            raise StateError(StateErrorCode.INVALID_TRANSITION)

        now = utcnow()
        updated = (
            db.query(Doctor)
            .filter(
                Doctor.id == doctor_id,
                Doctor.approval_status == DoctorApprovalStatus.PENDING.value,
            )
            .update(
                {
                    Doctor.approval_status: target.value,
                    Doctor.admin_approved_by: int(acting_admin_id),
                    Doctor.admin_approved_at: now,
                    Doctor.admin_approval_notes: notes,
                    Doctor.updated_at: now,
                },
                synchronize_session=False,
            )
        )
        if updated != 1:
            db.rollback()
            current = db.query(Doctor.approval_status).filter(Doctor.id == doctor_id).scalar()
            db.refresh(doctor)
            if current == target.value:
                return doctor
            logger.warning("Doctor %s changed concurrently; %s lost", doctor_id, target.value)
            raise StateError(StateErrorCode.CONFLICT)

        db.add(
            AdminActivityLog(
                admin_id=int(acting_admin_id),
                activity=f"doctor:{doctor_id}:{target.value}",
            )
        )
        db.commit()
        db.refresh(doctor)
        logger.info("Doctor %s %s by admin %s", doctor_id, target.value, acting_admin_id)
        return doctor
