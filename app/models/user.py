from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, CheckConstraint, event
from sqlalchemy.orm import relationship, validates
from datetime import datetime
from app.core.database import Base
from app.core.constants import UserRole


class User(Base):
    """A principal: one identity, one creation time, a profile, never hard-deleted."""

    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=True)

    # Profile
    full_name = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)
    
    # Soft delete keeps audit linkage intact
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    
    # Relationships
    role_assignment = relationship("RoleAssignment", back_populates="user", uselist=False)
    doctor = relationship(
        "Doctor",
        back_populates="user",
        uselist=False,
        foreign_keys="Doctor.user_id",
    )
    patient = relationship("Patient", back_populates="user", uselist=False)
    sessions = relationship("UserSession", back_populates="user")
    kyc_document = relationship(
        "KycDocument",
        back_populates="user",
        uselist=False,
        foreign_keys="KycDocument.user_id",
    )
    
    def __repr__(self):
        return f"<User {self.email}>"

    @validates("phone")
    def normalize_phone(self, key, value):
        return value or None


class RoleAssignment(Base):
    """Exactly one role per principal, written at registration and never changed."""

    __tablename__ = "user_roles"
    __table_args__ = (
        CheckConstraint("role IN ('patient', 'doctor', 'admin')", name="ck_user_roles_role"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)
    role = Column(String(20), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="role_assignment")

    @validates("role")
    def validate_role(self, key, value):
        return UserRole(value).value


@event.listens_for(RoleAssignment, "before_update")
def _refuse_role_change(mapper, connection, target):
    raise ValueError("Role assignments are immutable")
