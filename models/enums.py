from enum import Enum


class BaseStrEnum(str, Enum):
    """
    Base enum that serializes cleanly to a string
    and provides a .list() method for UI dropdowns.
    """

    def __str__(self):
        return str(self.value)

    @classmethod
    def list(cls):
        return [item.value for item in cls]


# -----------------------------------------------------
# PRINCIPAL KIND
# -----------------------------------------------------
class PrincipalKind(BaseStrEnum):
    """Who is making the request, least to most privileged."""

    guest = "guest"
    member = "member"
    team_member_admin = "team_member_admin"
    admin = "admin"
    super_admin = "super_admin"


ADMIN_KINDS = frozenset({PrincipalKind.admin, PrincipalKind.super_admin})


# -----------------------------------------------------
# AGENT ROLE (field hierarchy ladder)
# -----------------------------------------------------
class AgentRole(BaseStrEnum):
    """Declared top of the ladder first."""

    coordinator = "coordinator"
    supervisor = "supervisor"
    group_leader = "group-leader"
    pro = "pro"


# -----------------------------------------------------
# NOTE CATEGORY
# -----------------------------------------------------
class NoteCategory(BaseStrEnum):
    panchayath = "panchayath"
    coordinator = "coordinator"
    supervisor = "supervisor"
    group_leader = "group_leader"
    pro = "pro"
    customer = "customer"


# -----------------------------------------------------
# TASKS
# -----------------------------------------------------
class TaskStatus(BaseStrEnum):
    pending = "pending"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class TaskPriority(BaseStrEnum):
    normal = "normal"
    medium = "medium"
    high = "high"


# -----------------------------------------------------
# MEMBER REGISTRATION
# -----------------------------------------------------
class RegistrationStatus(BaseStrEnum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
