# models/panchayath.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class PanchayathBase(BaseModel):
    name: str = Field(..., min_length=1)
    district: str
    state: str


class PanchayathCreate(PanchayathBase):
    pass


class Panchayath(PanchayathBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_row(cls, row: dict) -> "Panchayath":
        return cls.model_validate(row)
