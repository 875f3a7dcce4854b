"""KYC identity document model."""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, DateTime, Text, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.database import Base
from app.core.constants import KycStatus


class KycDocument(Base):
    __tablename__ = "kyc_documents"
    __table_args__ = (
        CheckConstraint(
            "verification_status IN ('pending', 'verified', 'rejected')",
            name="ck_kyc_documents_status",
        ),
        CheckConstraint(
            "(verification_status = 'rejected') = (rejection_reason IS NOT NULL)",
            name="ck_kyc_documents_rejection_reason",
        ),
        CheckConstraint(
            "(verification_status = 'pending') = (verified_by IS NULL AND verified_at IS NULL)",
            name="ck_kyc_documents_verifier",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    # Unique: at most one document per principal
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)

    document_type = Column(String(30), nullable=False)
    document_number = Column(String(50), nullable=False)
    full_name = Column(String(100), nullable=False)
    date_of_birth = Column(Date, nullable=False)

    verification_status = Column(String(20), default=KycStatus.PENDING.value, nullable=False, index=True)
    rejection_reason = Column(Text, nullable=True)
    verified_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    verified_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="kyc_document", foreign_keys=[user_id])
    verifier = relationship("User", foreign_keys=[verified_by])
    audit_entries = relationship(
        "KycAuditLog",
        back_populates="kyc_document",
        order_by="KycAuditLog.id",
    )
