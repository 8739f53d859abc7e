# -------------------------
# Enums
# -------------------------
from .enums import (
    AgentRole,
    NoteCategory,
    PrincipalKind,
    RegistrationStatus,
    TaskPriority,
    TaskStatus,
)

# -------------------------
# Principal
# -------------------------
from .principal import Principal, Scope, anonymous

# -------------------------
# Hierarchy records
# -------------------------
from .agent import Agent, AgentCreate, ROLE_LADDER, superior_role
from .panchayath import Panchayath, PanchayathCreate

# -------------------------
# Teams & grants
# -------------------------
from .team import Team, TeamMember, TeamMemberCreate, TeamRead
from .permission import (
    Permission,
    PermissionCreate,
    PermissionUpdate,
    TeamPermission,
    TeamPermissionGrant,
    UserPermission,
    UserPermissionGrant,
)

# -------------------------
# Notes, tasks, registrations
# -------------------------
from .note import Note, NoteCreate, NoteUpdate
from .task import Task
from .registration import RegistrationRequest

__all__ = [
    # enums
    "AgentRole",
    "NoteCategory",
    "PrincipalKind",
    "RegistrationStatus",
    "TaskPriority",
    "TaskStatus",

    # principal
    "Principal",
    "Scope",
    "anonymous",

    # hierarchy
    "Agent",
    "AgentCreate",
    "ROLE_LADDER",
    "superior_role",
    "Panchayath",
    "PanchayathCreate",

    # teams & grants
    "Team",
    "TeamMember",
    "TeamMemberCreate",
    "TeamRead",
    "Permission",
    "PermissionCreate",
    "PermissionUpdate",
    "TeamPermission",
    "TeamPermissionGrant",
    "UserPermission",
    "UserPermissionGrant",

    # notes, tasks, registrations
    "Note",
    "NoteCreate",
    "NoteUpdate",
    "Task",
    "RegistrationRequest",
]
