"""Doctor schemas."""
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class DoctorRead(BaseModel):
    id: int
    user_id: int
    specialization: str
    license_number: str
    years_of_experience: Optional[int]
    bio: Optional[str]
    approval_status: str
    approved: bool
    admin_approved_by: Optional[int] = None
    admin_approved_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PendingDoctorRead(BaseModel):
    id: int
    user_id: int
    full_name: Optional[str]
    email: str
    specialization: str
    license_number: str
    years_of_experience: Optional[int]
    bio: Optional[str]
    created_at: datetime


class DoctorDecisionRequest(BaseModel):
    notes: Optional[str] = None


class ApprovalStatusRead(BaseModel):
    doctor_id: int
    approved: bool
