# routers/hierarchy.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.access_service import AccessService
from core.capabilities import Capability
from core.hierarchy import ALL, HierarchyFilters, HierarchySummary, superior_options
from core.permission_helpers import can_access, requires_capability
from core.request_guard import SupersededRequest
from core.store import AccessStore
from dependencies.auth import get_access_service, get_authenticated_principal, get_store
from models import Agent, AgentCreate, AgentRole, Principal, PrincipalKind

router = APIRouter(
    tags=["Hierarchy"],
)


def ensure_hierarchy_access(principal: Principal):
    """
    Members and guests always see their own panchayath's hierarchy.
    Team member admins need the hierarchy_view capability.
    """
    if principal.kind in (PrincipalKind.member, PrincipalKind.guest):
        return
    if not can_access(principal, Capability.hierarchy_view):
        raise HTTPException(403, f"Insufficient permissions: '{Capability.hierarchy_view}' required")


# ============================================================
# SUMMARY (counts + filtered list + tree)
# ============================================================
@router.get("/hierarchy/summary", response_model=HierarchySummary)
def hierarchy_summary(
    search: str = Query("", description="Matches name, phone or ward (case-insensitive)"),
    panchayath_id: str = Query(ALL),
    role: str = Query(ALL, description="coordinator | supervisor | group-leader | pro | all"),
    principal: Principal = Depends(get_authenticated_principal),
    service: AccessService = Depends(get_access_service),
):
    ensure_hierarchy_access(principal)

    if role != ALL and role not in AgentRole.list():
        raise HTTPException(400, f"Invalid role: {role}")

    filters = HierarchyFilters(search=search, panchayath_id=panchayath_id, role=role)
    try:
        return service.load_hierarchy(principal, filters)
    except SupersededRequest:
        raise HTTPException(409, "A newer hierarchy request replaced this one")


# ============================================================
# AGENTS
# ============================================================
@router.get("/agents", response_model=List[Agent])
def list_agents(
    role: Optional[AgentRole] = Query(None),
    principal: Principal = Depends(get_authenticated_principal),
    store: AccessStore = Depends(get_store),
):
    ensure_hierarchy_access(principal)
    agents = store.list_agents(principal)
    if role:
        agents = [a for a in agents if a.role == role]
    return agents


@router.get("/agents/superior-options", response_model=List[Agent])
def list_superior_options(
    panchayath_id: str,
    role: AgentRole,
    principal: Principal = Depends(get_authenticated_principal),
    store: AccessStore = Depends(get_store),
):
    ensure_hierarchy_access(principal)
    return superior_options(store.list_agents(principal), panchayath_id, role)


@router.post("/agents", response_model=Agent)
def create_agent(
    payload: AgentCreate,
    principal: Principal = Depends(requires_capability(Capability.settings)),
    service: AccessService = Depends(get_access_service),
):
    return service.create_agent(principal, payload)
