# core/store.py

"""
Typed boundary over the Supabase tables used by the console.

Every method returns DTOs from `models`; raw row dicts never leave this
module. Client failures surface as `StoreUnavailable`, constraint failures
as `InvalidGrant`, and missing rows as `NotFound`.
"""

from typing import Iterable, List, Optional

from supabase import Client

from core.errors import InvalidGrant, NotFound, StoreUnavailable, handle_supabase_error
from core.scope import filter_by_scope, scope_query
from core.supabase_client import get_supabase_client
from core.utils import sanitize
from models import (
    Agent,
    AgentCreate,
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
    Task,
    Team,
    TeamMember,
    TeamPermission,
    UserPermission,
)


# ============================================================
# Table names
# ============================================================
AGENTS = "agents"
PANCHAYATHS = "panchayaths"
TEAMS = "management_teams"
TEAM_MEMBERS = "management_team_members"
PERMISSIONS = "admin_permissions"
TEAM_PERMISSIONS = "team_permissions"
USER_PERMISSIONS = "admin_role_permissions"
ADMIN_USERS = "admin_users"
NOTES = "panchayath_notes"
TASKS = "tasks"
REGISTRATIONS = "user_registration_requests"


class AccessStore:
    def __init__(self, client: Optional[Client] = None):
        self._client = client

    # --------------------------------------------------------
    # Plumbing
    # --------------------------------------------------------
    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_client()
        if self._client is None:
            raise StoreUnavailable("Supabase client not configured")
        return self._client

    def _table(self, name: str):
        return self.client.table(name)

    @staticmethod
    def _execute(query, operation: str) -> list:
        try:
            return query.execute().data or []
        except Exception as e:
            raise handle_supabase_error(e, operation) from e

    def _first(self, table: str, column: str, value, operation: str) -> Optional[dict]:
        rows = self._execute(
            self._table(table).select("*").eq(column, value).limit(1),
            operation,
        )
        return rows[0] if rows else None

    # ========================================================
    # PERMISSION DEFINITIONS
    # ========================================================
    def list_permissions(self, active_only: bool = False) -> List[Permission]:
        query = self._table(PERMISSIONS).select("*")
        if active_only:
            query = query.eq("is_active", True)
        query = query.order("category").order("permission_name")
        return [Permission.from_row(r) for r in self._execute(query, "Failed to fetch permissions")]

    def get_permission(self, permission_id: str) -> Permission:
        row = self._first(PERMISSIONS, "id", permission_id, "Failed to fetch permission")
        if not row:
            raise NotFound(f"Permission {permission_id} not found")
        return Permission.from_row(row)

    def get_permissions(self, permission_ids: Iterable[str]) -> List[Permission]:
        ids = sorted(set(permission_ids))
        if not ids:
            return []
        rows = self._execute(
            self._table(PERMISSIONS).select("*").in_("id", ids),
            "Failed to fetch permissions",
        )
        return [Permission.from_row(r) for r in rows]

    def create_permission(self, payload: PermissionCreate) -> Permission:
        data = sanitize(payload.model_dump())
        existing = self._first(PERMISSIONS, "permission_name", data["permission_name"], "Failed to check permission")
        if existing:
            raise InvalidGrant(f"Permission '{data['permission_name']}' already exists")

        rows = self._execute(self._table(PERMISSIONS).insert(data), "Failed to create permission")
        return Permission.from_row(rows[0])

    def update_permission(self, permission_id: str, payload: PermissionUpdate) -> Permission:
        updates = sanitize(payload.model_dump(exclude_unset=True))
        if not updates:
            return self.get_permission(permission_id)

        if "permission_name" in updates:
            if not updates["permission_name"]:
                raise InvalidGrant("Permission name cannot be empty")
            existing = self._first(PERMISSIONS, "permission_name", updates["permission_name"], "Failed to check permission")
            if existing and existing.get("id") != permission_id:
                raise InvalidGrant(f"Permission '{updates['permission_name']}' already exists")

        rows = self._execute(
            self._table(PERMISSIONS).update(updates).eq("id", permission_id),
            "Failed to update permission",
        )
        if not rows:
            raise NotFound(f"Permission {permission_id} not found")
        return Permission.from_row(rows[0])

    def delete_permission(self, permission_id: str):
        rows = self._execute(
            self._table(PERMISSIONS).delete().eq("id", permission_id),
            "Failed to delete permission",
        )
        if not rows:
            raise NotFound(f"Permission {permission_id} not found")

    # ========================================================
    # TEAMS
    # ========================================================
    def list_teams(self) -> List[Team]:
        rows = self._execute(self._table(TEAMS).select("*").order("name"), "Failed to fetch teams")
        return [Team.from_row(r) for r in rows]

    def get_team(self, team_id: str) -> Team:
        row = self._first(TEAMS, "id", team_id, "Failed to fetch team")
        if not row:
            raise NotFound(f"Team {team_id} not found")
        return Team.from_row(row)

    def list_team_members(self, team_ids: Optional[Iterable[str]] = None) -> List[TeamMember]:
        query = self._table(TEAM_MEMBERS).select("*")
        if team_ids is not None:
            ids = sorted(set(team_ids))
            if not ids:
                return []
            query = query.in_("team_id", ids)
        return [TeamMember.from_row(r) for r in self._execute(query, "Failed to fetch team members")]

    def list_agent_team_ids(self, agent_id: str) -> List[str]:
        rows = self._execute(
            self._table(TEAM_MEMBERS).select("team_id").eq("agent_id", agent_id),
            "Failed to fetch team memberships",
        )
        return list(dict.fromkeys(r["team_id"] for r in rows))

    def add_team_member(self, team_id: str, agent_id: str) -> TeamMember:
        self.get_team(team_id)
        self.get_agent(agent_id)

        existing = self._execute(
            self._table(TEAM_MEMBERS).select("*").eq("team_id", team_id).eq("agent_id", agent_id).limit(1),
            "Failed to check team membership",
        )
        if existing:
            raise InvalidGrant("Agent is already a member of this team")

        rows = self._execute(
            self._table(TEAM_MEMBERS).insert({"team_id": team_id, "agent_id": agent_id}),
            "Failed to add team member",
        )
        return TeamMember.from_row(rows[0])

    def remove_team_member(self, team_id: str, agent_id: str):
        rows = self._execute(
            self._table(TEAM_MEMBERS).delete().eq("team_id", team_id).eq("agent_id", agent_id),
            "Failed to remove team member",
        )
        if not rows:
            raise NotFound("Team membership not found")

    # ========================================================
    # GRANTS: team → permission
    # ========================================================
    def list_team_permissions(self, team_ids: Optional[Iterable[str]] = None) -> List[TeamPermission]:
        query = self._table(TEAM_PERMISSIONS).select("*")
        if team_ids is not None:
            ids = sorted(set(team_ids))
            if not ids:
                return []
            query = query.in_("team_id", ids)
        return [TeamPermission.from_row(r) for r in self._execute(query, "Failed to fetch team permissions")]

    def grant_team_permission(self, team_id: str, permission_id: str, granted_by: Optional[str] = None) -> TeamPermission:
        self._require_grant_targets(TEAMS, team_id, "Team", permission_id)

        existing = self._execute(
            self._table(TEAM_PERMISSIONS).select("id")
            .eq("team_id", team_id).eq("permission_id", permission_id).limit(1),
            "Failed to check team permission",
        )
        if existing:
            raise InvalidGrant("Team already holds this permission")

        rows = self._execute(
            self._table(TEAM_PERMISSIONS).insert({
                "team_id": team_id,
                "permission_id": permission_id,
                "granted_by": granted_by,
            }),
            "Failed to grant team permission",
        )
        return TeamPermission.from_row(rows[0])

    def revoke_team_permission(self, team_id: str, permission_id: str):
        rows = self._execute(
            self._table(TEAM_PERMISSIONS).delete().eq("team_id", team_id).eq("permission_id", permission_id),
            "Failed to revoke team permission",
        )
        if not rows:
            raise NotFound("Team permission grant not found")

    # ========================================================
    # GRANTS: admin user → permission
    # ========================================================
    def list_user_permissions(self, admin_user_id: Optional[str] = None) -> List[UserPermission]:
        query = self._table(USER_PERMISSIONS).select("*")
        if admin_user_id is not None:
            query = query.eq("admin_user_id", admin_user_id)
        query = query.order("created_at", desc=True)
        return [UserPermission.from_row(r) for r in self._execute(query, "Failed to fetch user permissions")]

    def grant_user_permission(self, admin_user_id: str, permission_id: str, granted_by: Optional[str] = None) -> UserPermission:
        self._require_grant_targets(ADMIN_USERS, admin_user_id, "Admin user", permission_id)

        existing = self._execute(
            self._table(USER_PERMISSIONS).select("id")
            .eq("admin_user_id", admin_user_id).eq("permission_id", permission_id).limit(1),
            "Failed to check user permission",
        )
        if existing:
            raise InvalidGrant("Admin user already holds this permission")

        rows = self._execute(
            self._table(USER_PERMISSIONS).insert({
                "admin_user_id": admin_user_id,
                "permission_id": permission_id,
                "granted_by": granted_by,
            }),
            "Failed to grant user permission",
        )
        return UserPermission.from_row(rows[0])

    def revoke_user_permission(self, grant_id: str):
        rows = self._execute(
            self._table(USER_PERMISSIONS).delete().eq("id", grant_id),
            "Failed to revoke user permission",
        )
        if not rows:
            raise NotFound(f"Permission grant {grant_id} not found")

    def _require_grant_targets(self, holder_table: str, holder_id: str, holder_label: str, permission_id: str):
        if not self._first(holder_table, "id", holder_id, f"Failed to fetch {holder_label.lower()}"):
            raise InvalidGrant(f"{holder_label} {holder_id} does not exist")

        row = self._first(PERMISSIONS, "id", permission_id, "Failed to fetch permission")
        if not row:
            raise InvalidGrant(f"Permission {permission_id} does not exist")
        if not row.get("is_active", True):
            raise InvalidGrant(f"Permission '{row.get('permission_name')}' is inactive")

    # ========================================================
    # HIERARCHY (scoped reads)
    # ========================================================
    def list_agents(self, principal: Principal) -> List[Agent]:
        query = scope_query(principal, self._table(AGENTS).select("*"))
        if query is None:
            return []
        rows = self._execute(query.order("name"), "Failed to fetch agents")
        return filter_by_scope(principal, [Agent.from_row(r) for r in rows])

    def get_agent(self, agent_id: str) -> Agent:
        row = self._first(AGENTS, "id", agent_id, "Failed to fetch agent")
        if not row:
            raise NotFound(f"Agent {agent_id} not found")
        return Agent.from_row(row)

    def create_agent(self, payload: AgentCreate) -> Agent:
        rows = self._execute(
            self._table(AGENTS).insert(sanitize(payload.model_dump(mode="json"))),
            "Failed to add agent",
        )
        return Agent.from_row(rows[0])

    def list_panchayaths(self, principal: Principal) -> List[Panchayath]:
        query = scope_query(principal, self._table(PANCHAYATHS).select("*"), column="id")
        if query is None:
            return []
        rows = self._execute(query.order("name"), "Failed to fetch panchayaths")
        return filter_by_scope(principal, [Panchayath.from_row(r) for r in rows], key="id")

    def create_panchayath(self, payload: PanchayathCreate) -> Panchayath:
        rows = self._execute(
            self._table(PANCHAYATHS).insert(sanitize(payload.model_dump())),
            "Failed to add panchayath",
        )
        return Panchayath.from_row(rows[0])

    # ========================================================
    # NOTES
    # ========================================================
    def list_notes(self, principal: Principal, panchayath_id: Optional[str] = None) -> List[Note]:
        query = scope_query(principal, self._table(NOTES).select("*"))
        if query is None:
            return []
        if panchayath_id:
            query = query.eq("panchayath_id", panchayath_id)
        rows = self._execute(query.order("created_at", desc=True), "Failed to fetch notes")
        return filter_by_scope(principal, [Note.from_row(r) for r in rows])

    def get_note(self, note_id: str) -> Note:
        row = self._first(NOTES, "id", note_id, "Failed to fetch note")
        if not row:
            raise NotFound(f"Note {note_id} not found")
        return Note.from_row(row)

    def create_note(self, payload: NoteCreate, created_by: Optional[str] = None) -> Note:
        data = sanitize(payload.model_dump(mode="json"))
        data["created_by"] = created_by
        rows = self._execute(self._table(NOTES).insert(data), "Failed to add note")
        return Note.from_row(rows[0])

    def update_note(self, note_id: str, text: str) -> Note:
        rows = self._execute(
            self._table(NOTES).update({"note": text.strip()}).eq("id", note_id),
            "Failed to update note",
        )
        if not rows:
            raise NotFound(f"Note {note_id} not found")
        return Note.from_row(rows[0])

    def delete_note(self, note_id: str):
        rows = self._execute(self._table(NOTES).delete().eq("id", note_id), "Failed to delete note")
        if not rows:
            raise NotFound(f"Note {note_id} not found")

    # ========================================================
    # TASKS
    # ========================================================
    def list_tasks(self, principal: Principal, team_id: Optional[str] = None) -> List[Task]:
        query = scope_query(principal, self._table(TASKS).select("*"))
        if query is None:
            return []
        if team_id:
            query = query.eq("allocated_to_team", team_id)
        rows = self._execute(query.order("created_at", desc=True), "Failed to fetch tasks")
        return filter_by_scope(principal, [Task.from_row(r) for r in rows])

    # ========================================================
    # MEMBER REGISTRATIONS
    # ========================================================
    def list_registrations(self, principal: Principal, status: Optional[RegistrationStatus] = None) -> List[RegistrationRequest]:
        query = scope_query(principal, self._table(REGISTRATIONS).select("*"))
        if query is None:
            return []
        if status:
            query = query.eq("status", str(status))
        rows = self._execute(query.order("created_at", desc=True), "Failed to fetch registrations")
        return filter_by_scope(principal, [RegistrationRequest.from_row(r) for r in rows])

    def get_registration(self, registration_id: str) -> RegistrationRequest:
        row = self._first(REGISTRATIONS, "id", registration_id, "Failed to fetch registration")
        if not row:
            raise NotFound(f"Registration {registration_id} not found")
        return RegistrationRequest.from_row(row)

    def set_registration_status(self, registration_id: str, status: RegistrationStatus) -> RegistrationRequest:
        rows = self._execute(
            self._table(REGISTRATIONS).update({"status": str(status)}).eq("id", registration_id),
            "Failed to update registration",
        )
        if not rows:
            raise NotFound(f"Registration {registration_id} not found")
        return RegistrationRequest.from_row(rows[0])
