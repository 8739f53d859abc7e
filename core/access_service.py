# core/access_service.py

"""
Console actions that touch grants, notes and hierarchy data.

Mutations follow one order: guard against duplicate submission, check
capability and scope, commit to the store, then invalidate cached
capabilities, then notify. Nothing cached changes before the commit.
"""

from typing import Optional

from fastapi import HTTPException

from core.cache import invalidate_capabilities
from core.capabilities import Capability
from core.errors import AccessControlError
from core.hierarchy import HierarchyFilters, HierarchySummary, is_valid_superior, summarize
from core.logging_config import logger
from core.notifications import notify_error, notify_success
from core.permission_helpers import can_access, require_admin
from core.request_guard import InFlightGuard, LatestRequestTracker
from core.scope import ensure_in_scope
from core.store import AccessStore
from models import (
    Agent,
    AgentCreate,
    AgentRole,
    Note,
    NoteCreate,
    Panchayath,
    PanchayathCreate,
    Permission,
    PermissionCreate,
    PermissionUpdate,
    Principal,
    RegistrationRequest,
    RegistrationStatus,
    TeamMember,
    TeamPermission,
    UserPermission,
)


def _require(principal: Principal, capability: Capability):
    if not can_access(principal, capability):
        raise HTTPException(403, f"Insufficient permissions: '{capability}' required")


class AccessService:
    def __init__(self, store: Optional[AccessStore] = None):
        self.store = store or AccessStore()
        self.guard = InFlightGuard()
        self.tracker = LatestRequestTracker()

    # --------------------------------------------------------
    # Shared mutation runner
    # --------------------------------------------------------
    def _mutate(self, key, action, success: str, failure: str, *, grants_changed: bool = False):
        with self.guard.hold(key):
            try:
                result = action()
            except AccessControlError as e:
                notify_error("Error", f"{failure}: {e.message}")
                raise

        if grants_changed:
            invalidate_capabilities()
        notify_success("Success", success)
        return result

    # ========================================================
    # TEAM GRANTS
    # ========================================================
    def grant_team_permission(self, principal: Principal, team_id: str, permission_id: str) -> TeamPermission:
        require_admin(principal)
        return self._mutate(
            ("team-permission", team_id, permission_id),
            lambda: self.store.grant_team_permission(team_id, permission_id, granted_by=principal.id),
            "Permission granted successfully",
            "Failed to grant permission",
            grants_changed=True,
        )

    def revoke_team_permission(self, principal: Principal, team_id: str, permission_id: str):
        require_admin(principal)
        return self._mutate(
            ("team-permission", team_id, permission_id),
            lambda: self.store.revoke_team_permission(team_id, permission_id),
            "Permission removed successfully",
            "Failed to remove permission",
            grants_changed=True,
        )

    # ========================================================
    # DIRECT ADMIN GRANTS
    # ========================================================
    def grant_user_permission(self, principal: Principal, admin_user_id: str, permission_id: str) -> UserPermission:
        require_admin(principal)
        return self._mutate(
            ("user-permission", admin_user_id, permission_id),
            lambda: self.store.grant_user_permission(admin_user_id, permission_id, granted_by=principal.id),
            "Permission granted successfully",
            "Failed to grant permission",
            grants_changed=True,
        )

    def revoke_user_permission(self, principal: Principal, grant_id: str):
        require_admin(principal)
        return self._mutate(
            ("user-permission", grant_id),
            lambda: self.store.revoke_user_permission(grant_id),
            "Permission revoked successfully",
            "Failed to revoke permission",
            grants_changed=True,
        )

    # ========================================================
    # PERMISSION DEFINITIONS (renames and deactivation change
    # what every holder resolves to)
    # ========================================================
    def create_permission(self, principal: Principal, payload: PermissionCreate) -> Permission:
        require_admin(principal)
        return self._mutate(
            ("permission-create", payload.permission_name.strip()),
            lambda: self.store.create_permission(payload),
            "Permission created successfully",
            "Failed to create permission",
        )

    def update_permission(self, principal: Principal, permission_id: str, payload: PermissionUpdate) -> Permission:
        require_admin(principal)
        return self._mutate(
            ("permission", permission_id),
            lambda: self.store.update_permission(permission_id, payload),
            "Permission updated successfully",
            "Failed to update permission",
            grants_changed=True,
        )

    def delete_permission(self, principal: Principal, permission_id: str):
        require_admin(principal)
        return self._mutate(
            ("permission", permission_id),
            lambda: self.store.delete_permission(permission_id),
            "Permission deleted successfully",
            "Failed to delete permission",
            grants_changed=True,
        )

    # ========================================================
    # TEAM MEMBERSHIP (changes inherited grants)
    # ========================================================
    def add_team_member(self, principal: Principal, team_id: str, agent_id: str) -> TeamMember:
        _require(principal, Capability.team_management)
        agent = self.store.get_agent(agent_id)
        ensure_in_scope(principal, agent.panchayath_id, "add team members from")
        return self._mutate(
            ("team-member", team_id, agent_id),
            lambda: self.store.add_team_member(team_id, agent_id),
            "Team member added successfully",
            "Failed to add team member",
            grants_changed=True,
        )

    def remove_team_member(self, principal: Principal, team_id: str, agent_id: str):
        _require(principal, Capability.team_management)
        agent = self.store.get_agent(agent_id)
        ensure_in_scope(principal, agent.panchayath_id, "remove team members from")
        return self._mutate(
            ("team-member", team_id, agent_id),
            lambda: self.store.remove_team_member(team_id, agent_id),
            "Team member removed successfully",
            "Failed to remove team member",
            grants_changed=True,
        )

    # ========================================================
    # AGENTS & PANCHAYATHS
    # ========================================================
    def create_agent(self, principal: Principal, payload: AgentCreate) -> Agent:
        """
        Add an agent. A superior, when given, must be one rung up the
        ladder in the same panchayath; coordinators have none.
        """
        _require(principal, Capability.settings)
        ensure_in_scope(principal, payload.panchayath_id, "add agents to")

        if payload.superior_id:
            superior = self.store.get_agent(payload.superior_id)
            candidate = Agent(id="new", **payload.model_dump())
            if not is_valid_superior(candidate, superior):
                raise HTTPException(400, "Superior must be one level up in the same panchayath")
        elif payload.role != AgentRole.coordinator:
            logger.info(f"Agent '{payload.name}' added without a superior")

        return self._mutate(
            ("agent-create", payload.panchayath_id, payload.name.strip(), payload.phone),
            lambda: self.store.create_agent(payload),
            "Agent added successfully",
            "Failed to add agent",
        )

    def create_panchayath(self, principal: Principal, payload: PanchayathCreate) -> Panchayath:
        # A new panchayath is outside every restricted scope.
        require_admin(principal)
        return self._mutate(
            ("panchayath-create", payload.name.strip()),
            lambda: self.store.create_panchayath(payload),
            "Panchayath added successfully",
            "Failed to add panchayath",
        )

    # ========================================================
    # NOTES
    # ========================================================
    def create_note(self, principal: Principal, payload: NoteCreate) -> Note:
        _require(principal, Capability.panchayath_notes)
        ensure_in_scope(principal, payload.panchayath_id, "add notes to")
        if payload.agent_id:
            agent = self.store.get_agent(payload.agent_id)
            if agent.panchayath_id != payload.panchayath_id:
                raise HTTPException(400, "Agent does not belong to this panchayath")
        return self._mutate(
            ("note-create", principal.cache_key, payload.panchayath_id, payload.note),
            lambda: self.store.create_note(payload, created_by=principal.id),
            "Note added successfully",
            "Failed to add note",
        )

    def update_note(self, principal: Principal, note_id: str, text: str) -> Note:
        _require(principal, Capability.panchayath_notes)
        note = self.store.get_note(note_id)
        ensure_in_scope(principal, note.panchayath_id, "edit notes of")
        return self._mutate(
            ("note", note_id),
            lambda: self.store.update_note(note_id, text),
            "Note updated successfully",
            "Failed to update note",
        )

    def delete_note(self, principal: Principal, note_id: str):
        _require(principal, Capability.panchayath_notes)
        note = self.store.get_note(note_id)
        ensure_in_scope(principal, note.panchayath_id, "delete notes of")
        return self._mutate(
            ("note", note_id),
            lambda: self.store.delete_note(note_id),
            "Note deleted successfully",
            "Failed to delete note",
        )

    # ========================================================
    # MEMBER APPROVALS
    # ========================================================
    def decide_registration(self, principal: Principal, registration_id: str, status: RegistrationStatus) -> RegistrationRequest:
        _require(principal, Capability.member_management)
        registration = self.store.get_registration(registration_id)
        ensure_in_scope(principal, registration.panchayath_id, "review registrations of")
        return self._mutate(
            ("registration", registration_id),
            lambda: self.store.set_registration_status(registration_id, status),
            f"Registration {status}",
            "Failed to update registration",
        )

    # ========================================================
    # HIERARCHY (last request wins per principal)
    # ========================================================
    def load_hierarchy(self, principal: Principal, filters: HierarchyFilters) -> HierarchySummary:
        key = ("hierarchy", principal.cache_key)
        token = self.tracker.begin(key)

        try:
            agents = self.store.list_agents(principal)
            panchayaths = self.store.list_panchayaths(principal)
        except AccessControlError:
            self.tracker.forget(key, token)
            raise

        return self.tracker.finish(key, token, summarize(agents, panchayaths, filters))
