# models/team.py

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class TeamBase(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    is_active: bool = True


class Team(TeamBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_row(cls, row: dict) -> "Team":
        return cls.model_validate(row)


class TeamMember(BaseModel):
    """Link row in `management_team_members`."""
    id: Optional[str] = None
    team_id: str
    agent_id: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "TeamMember":
        return cls.model_validate(row)


class TeamMemberCreate(BaseModel):
    agent_id: str


class TeamRead(Team):
    """Team with its member agent ids and granted permission names."""
    member_ids: List[str] = []
    permission_names: List[str] = []
