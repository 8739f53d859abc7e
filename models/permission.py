# models/permission.py

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


# ===============================================================
# PERMISSION DEFINITIONS (`admin_permissions`)
# ===============================================================
class PermissionBase(BaseModel):
    permission_name: str = Field(..., min_length=1, description="Unique capability key")
    description: Optional[str] = None
    category: str = "general"
    is_active: bool = True


class PermissionCreate(PermissionBase):
    pass


class PermissionUpdate(BaseModel):
    """Partial update. Renaming changes the effect for every holder."""
    permission_name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = None


class Permission(PermissionBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_row(cls, row: dict) -> "Permission":
        return cls.model_validate(row)


# ===============================================================
# GRANTS
# ===============================================================
class TeamPermission(BaseModel):
    """Team → permission grant, inherited by every team member."""
    id: Optional[str] = None
    team_id: str
    permission_id: str
    granted_by: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "TeamPermission":
        return cls.model_validate(row)


class UserPermission(BaseModel):
    """Direct admin user → permission grant (`admin_role_permissions`)."""
    id: Optional[str] = None
    admin_user_id: str
    permission_id: str
    granted_by: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "UserPermission":
        return cls.model_validate(row)


class TeamPermissionGrant(BaseModel):
    team_id: str
    permission_id: str


class UserPermissionGrant(BaseModel):
    admin_user_id: str
    permission_id: str
