# models/agent.py

from typing import Dict, Optional
from datetime import datetime
from pydantic import BaseModel, Field
from models.enums import AgentRole


# ===============================================================
# ROLE LADDER
# ===============================================================
ROLE_LADDER = (
    AgentRole.coordinator,
    AgentRole.supervisor,
    AgentRole.group_leader,
    AgentRole.pro,
)

ROLE_RANK: Dict[AgentRole, int] = {role: rank for rank, role in enumerate(ROLE_LADDER)}


def superior_role(role: AgentRole) -> Optional[AgentRole]:
    """The role one rung up the ladder, or None for coordinators."""
    rank = ROLE_RANK[AgentRole(role)]
    return ROLE_LADDER[rank - 1] if rank > 0 else None


# ===============================================================
# AGENT MODELS
# ===============================================================
class AgentBase(BaseModel):
    name: str = Field(..., min_length=1)
    role: AgentRole
    panchayath_id: str
    superior_id: Optional[str] = None
    phone: Optional[str] = None
    ward: Optional[str] = None


class AgentCreate(AgentBase):
    """Payload for adding an agent to a panchayath."""
    pass


class Agent(AgentBase):
    """Agent row as read from the `agents` table."""
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_row(cls, row: dict) -> "Agent":
        return cls.model_validate(row)
