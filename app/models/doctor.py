from sqlalchemy import Column, Integer, String, Text, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from app.core.database import Base
from app.core.constants import DoctorApprovalStatus


class Doctor(Base):
    __tablename__ = "doctors"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    
    specialization = Column(String(100), nullable=False)
    license_number = Column(String(50), unique=True, index=True, nullable=False)
    years_of_experience = Column(Integer, nullable=True)
    bio = Column(Text, nullable=True)
    
    # Admin approval
    approval_status = Column(
        String(20),
        default=DoctorApprovalStatus.PENDING.value,
        nullable=False,
        index=True,
    )
    admin_approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    admin_approved_at = Column(DateTime, nullable=True)
    admin_approval_notes = Column(Text, nullable=True)
    
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    user = relationship("User", back_populates="doctor", foreign_keys=[user_id])
    admin_approver = relationship("User", foreign_keys=[admin_approved_by])

    @property
    def approved(self) -> bool:
        return self.approval_status == DoctorApprovalStatus.APPROVED.value
