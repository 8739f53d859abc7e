# models/note.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field
from models.enums import NoteCategory


class NoteBase(BaseModel):
    panchayath_id: str
    agent_id: Optional[str] = None
    category: NoteCategory = NoteCategory.panchayath
    note: str = Field(..., min_length=1)


class NoteCreate(NoteBase):
    pass


class NoteUpdate(BaseModel):
    note: str = Field(..., min_length=1)


class Note(NoteBase):
    id: str
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_row(cls, row: dict) -> "Note":
        # Legacy rows were written before categories existed.
        if not row.get("category"):
            row = {**row, "category": NoteCategory.panchayath}
        return cls.model_validate(row)
