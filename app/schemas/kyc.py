"""KYC schemas.

Field rules live in ``app.utils.validators`` so the error codes stay the
same whichever layer calls them; these models only shape the payloads.
"""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class KycSubmitRequest(BaseModel):
    document_type: str
    document_number: str
    full_name: str
    date_of_birth: str


class KycRejectRequest(BaseModel):
    reason: Optional[str] = None


class KycStatusRead(BaseModel):
    id: int
    user_id: int
    document_type: str
    document_number: str
    full_name: str
    date_of_birth: date
    verification_status: str
    rejection_reason: Optional[str]
    verified_by: Optional[int]
    verified_at: Optional[datetime]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PendingKycRead(KycStatusRead):
    user_email: str


class AuditEntryRead(BaseModel):
    id: int
    kyc_document_id: int
    actor_id: int
    action: str
    outcome: str
    reason: Optional[str]
    created_at: datetime
    previous_hash: Optional[str]
    entry_hash: str

    model_config = ConfigDict(from_attributes=True)


class AuditChainRead(BaseModel):
    valid: bool
    entries: int
    broken_entry_id: Optional[int]


class AuditTrailRead(BaseModel):
    kyc_document_id: int
    entries: list[AuditEntryRead]
    chain: AuditChainRead
