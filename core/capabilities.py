# core/capabilities.py

# ============================================
# CENTRALIZED CAPABILITY → SECTION REGISTRY
# ============================================
from typing import NamedTuple, Optional, Tuple

from models.enums import BaseStrEnum


# Resolved set handed to admins. Never stored in the grant tables.
WILDCARD = "*"
ALL_CAPABILITIES = frozenset({WILDCARD})


class Capability(BaseStrEnum):
    """
    Every grantable capability key. Values match `admin_permissions.permission_name`.
    """

    team_management = "team_management"
    task_management = "task_management"
    reports_view = "reports_view"
    member_management = "member_management"
    hierarchy_view = "hierarchy_view"
    panchayath_notes = "panchayath_notes"
    settings = "settings"
    chat = "chat"


class Section(NamedTuple):
    section_id: str
    title: str
    required_capability: Optional[Capability]


BASELINE_SECTION = Section("dashboard", "Dashboard", None)


# =====================================================
# Console sections, in display order
# =====================================================
SECTION_REGISTRY: Tuple[Section, ...] = (
    BASELINE_SECTION,
    Section("approvals", "Member Approvals", Capability.member_management),
    Section("teams", "Team Management", Capability.team_management),
    Section("tasks", "Task Management", Capability.task_management),
    Section("reports", "Reports", Capability.reports_view),
    Section("users", "Member Management", Capability.member_management),
    Section("hierarchy", "Hierarchy View", Capability.hierarchy_view),
    Section("panchayath-notes", "Panchayath Notes", Capability.panchayath_notes),
    Section("panchayaths", "Panchayath Settings", Capability.settings),
    Section("notifications", "Team Communications", Capability.chat),
)


def capability_key(value) -> Optional[str]:
    """Normalize an enum member or raw string to a key; None for blanks."""
    if value is None:
        return None
    key = str(value).strip()
    return key or None
