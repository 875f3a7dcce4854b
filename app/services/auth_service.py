from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.models.user import User
from app.models.doctor import Doctor
from app.models.patient import Patient
from app.models.session import UserSession
from app.core.constants import UserRole, DoctorApprovalStatus, ValidationErrorCode
from app.core.security import hash_password, verify_password, create_access_token
from app.core.config import settings
from app.services.role_service import RoleService
from typing import Optional
from app.utils.errors import InvalidCredentialsError, UserAlreadyExistsError, ValidationError
from app.utils.helpers import utcnow
import logging

logger = logging.getLogger(__name__)

SELF_SERVICE_ROLES = (UserRole.PATIENT, UserRole.DOCTOR)


class AuthService:

    @staticmethod
    def register(
        db: Session,
        email: str,
        password: str,
        full_name: str,
        role: str,
        phone: Optional[str] = None,
        specialization: Optional[str] = None,
        license_number: Optional[str] = None,
        years_of_experience: Optional[int] = None,
        bio: Optional[str] = None,
    ) -> User:
        """
        Create a principal, its single role assignment and the role's
        profile record in one transaction.
        - Only patient and doctor roles can self-register
        - Doctors start pending admin approval
        """
        try:
            role = UserRole(role)
        except ValueError:
            role = None
        if role not in SELF_SERVICE_ROLES:
            raise ValidationError(ValidationErrorCode.INVALID_REGISTRATION, "role", "Role must be patient or doctor")
        if role == UserRole.DOCTOR and not (specialization and license_number):
            raise ValidationError(
                ValidationErrorCode.INVALID_REGISTRATION,
                "license_number",
                "Doctors must provide a specialization and license number",
            )

        if db.query(User.id).filter(User.email == email).first():
            raise UserAlreadyExistsError("Email already registered")

        user = AuthService._create_principal(db, email, password, full_name, phone, role)
        if role == UserRole.DOCTOR:
            db.add(
                Doctor(
                    user_id=user.id,
                    specialization=specialization,
                    license_number=license_number,
                    years_of_experience=years_of_experience,
                    bio=bio,
                    approval_status=DoctorApprovalStatus.PENDING.value,
                )
            )
        else:
            db.add(Patient(user_id=user.id))

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise UserAlreadyExistsError("Email or license number already registered")
        db.refresh(user)
        logger.info("Registered principal %s as %s", user.id, role.value)
        return user

    @staticmethod
    def create_admin(db: Session, email: str, password: str, full_name: str) -> User:
        """Bootstrap an administrator. Not reachable over HTTP."""
        if db.query(User.id).filter(User.email == email).first():
            raise UserAlreadyExistsError("Email already registered")
        user = AuthService._create_principal(db, email, password, full_name, None, UserRole.ADMIN)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise UserAlreadyExistsError("Email already registered")
        db.refresh(user)
        logger.info("Created admin principal %s", user.id)
        return user

    @staticmethod
    def _create_principal(
        db: Session,
        email: str,
        password: str,
        full_name: str,
        phone: Optional[str],
        role: UserRole,
    ) -> User:
        user = User(
            email=email,
            password_hash=hash_password(password),
            full_name=full_name,
            phone=phone,
        )
        db.add(user)
        db.flush()
        RoleService.assign_role(db, user.id, role)
        return user
    
    @staticmethod
    def login(db: Session, email: str, password: str, ip_address: str, user_agent: str = "") -> dict:
        """
        Email/password login
        - Verify credentials
        - Issue an access token and track its session
        """
        
        user = db.query(User).filter(User.email == email, User.is_deleted == False).first()  # noqa: E712
        if not user or not verify_password(password, user.password_hash or ""):
            raise InvalidCredentialsError("Invalid email or password")
        
        access_token, access_jti, expires_at = create_access_token(user_id=user.id)
        
        now = utcnow()
        db.add(
            UserSession(
                user_id=user.id,
                token_jti=access_jti,
                ip_address=ip_address,
                user_agent=user_agent,
                expires_at=expires_at.replace(tzinfo=None),
            )
        )
        user.last_login = now
        db.commit()
        
        return {
            "access_token": access_token,
            "token_type": "bearer",
            "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            "user_id": user.id,
        }

    @staticmethod
    def logout(db: Session, user_id: int, jti: str) -> None:
        session = (
            db.query(UserSession)
            .filter(UserSession.user_id == int(user_id), UserSession.token_jti == jti)
            .first()
        )
        if session and not session.is_revoked:
            session.is_revoked = True
            session.revoked_at = utcnow()
            session.revoked_reason = "logout"
            db.commit()
