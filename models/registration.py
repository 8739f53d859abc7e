# models/registration.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel
from models.enums import RegistrationStatus


class RegistrationRequest(BaseModel):
    """Row in `user_registration_requests` (member sign-up awaiting approval)."""
    id: str
    username: str
    mobile_number: str
    panchayath_id: str
    status: RegistrationStatus = RegistrationStatus.pending
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "RegistrationRequest":
        return cls.model_validate(row)
