"""Audit and admin activity log models.

Both tables are append-only. The ORM refuses to update or delete rows; the
initial migration adds the same guard as a database trigger on PostgreSQL.
"""
from sqlalchemy import Column, String, DateTime, Integer, Text, ForeignKey, event
from sqlalchemy.orm import relationship
from app.core.database import Base
from datetime import datetime


class KycAuditLog(Base):
    __tablename__ = "kyc_audit_log"

    id = Column(Integer, primary_key=True)
    kyc_document_id = Column(Integer, ForeignKey("kyc_documents.id"), nullable=False, index=True)
    actor_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    action = Column(String(20), nullable=False)
    outcome = Column(String(30), nullable=False)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Hash chain per document
    previous_hash = Column(String(64), nullable=True)
    entry_hash = Column(String(64), nullable=False, unique=True)

    kyc_document = relationship("KycDocument", back_populates="audit_entries")


class AdminActivityLog(Base):
    __tablename__ = "admin_activity_logs"

    id = Column(Integer, primary_key=True)
    admin_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    activity = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)


def _refuse_mutation(mapper, connection, target):
    raise ValueError(f"{target.__tablename__} is append-only")


for _model in (KycAuditLog, AdminActivityLog):
    event.listen(_model, "before_update", _refuse_mutation)
    event.listen(_model, "before_delete", _refuse_mutation)
