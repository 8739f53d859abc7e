# routers/teams.py

from typing import List

from fastapi import APIRouter, Depends

from core.access_service import AccessService
from core.capabilities import Capability
from core.permission_helpers import requires_capability
from core.scope import filter_by_scope
from core.store import AccessStore
from dependencies.auth import get_access_service, get_store
from models import Principal, TeamMember, TeamMemberCreate, TeamRead

router = APIRouter(
    prefix="/teams",
    tags=["Teams"],
)

team_access = requires_capability(Capability.team_management)


# ============================================================
# LIST TEAMS (with members + granted permission names)
# ============================================================
@router.get("", response_model=List[TeamRead])
def list_teams(
    principal: Principal = Depends(team_access),
    store: AccessStore = Depends(get_store),
):
    teams = store.list_teams()
    team_ids = [t.id for t in teams]

    # Members outside the caller's panchayath are not listed.
    agent_panchayaths = {a.id: a.panchayath_id for a in store.list_agents(principal)}
    members = filter_by_scope(
        principal,
        store.list_team_members(team_ids),
        key=lambda m: agent_panchayaths.get(m.agent_id),
    )
    grants = store.list_team_permissions(team_ids)
    names = {p.id: p.permission_name for p in store.get_permissions(g.permission_id for g in grants)}

    result = []
    for team in teams:
        result.append(TeamRead(
            **team.model_dump(),
            member_ids=[m.agent_id for m in members if m.team_id == team.id],
            permission_names=sorted(
                names[g.permission_id] for g in grants
                if g.team_id == team.id and g.permission_id in names
            ),
        ))
    return result


# ============================================================
# MEMBERSHIP
# ============================================================
@router.post("/{team_id}/members", response_model=TeamMember)
def add_member(
    team_id: str,
    payload: TeamMemberCreate,
    principal: Principal = Depends(team_access),
    service: AccessService = Depends(get_access_service),
):
    return service.add_team_member(principal, team_id, payload.agent_id)


@router.delete("/{team_id}/members/{agent_id}")
def remove_member(
    team_id: str,
    agent_id: str,
    principal: Principal = Depends(team_access),
    service: AccessService = Depends(get_access_service),
):
    service.remove_team_member(principal, team_id, agent_id)
    return {"success": True}
