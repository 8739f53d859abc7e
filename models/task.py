# models/task.py

from typing import Optional
from datetime import datetime, date
from pydantic import BaseModel
from models.enums import TaskStatus, TaskPriority


class Task(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.pending
    priority: TaskPriority = TaskPriority.normal
    allocated_to_team: Optional[str] = None
    allocated_to_agent: Optional[str] = None
    panchayath_id: Optional[str] = None
    due_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_row(cls, row: dict) -> "Task":
        return cls.model_validate(row)
