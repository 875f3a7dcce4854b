"""Patient schemas."""
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date


class PatientRead(BaseModel):
    id: int
    user_id: int
    date_of_birth: Optional[date]
    gender: Optional[str]
    emergency_contact_name: Optional[str]
    emergency_contact_phone: Optional[str]

    model_config = ConfigDict(from_attributes=True)
