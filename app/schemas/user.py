"""User request/response schemas."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class UserRead(BaseModel):
    id: int
    email: str
    full_name: Optional[str]
    phone: Optional[str]
    created_at: datetime
    role: Optional[str] = None
    doctor_approved: Optional[bool] = None

    model_config = ConfigDict(from_attributes=True)


class PermissionRead(BaseModel):
    allowed: bool
    reason: Optional[str] = None
