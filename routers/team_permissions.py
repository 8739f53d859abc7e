# routers/team_permissions.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from core.access_service import AccessService
from core.store import AccessStore
from dependencies.auth import get_access_service, get_admin_principal, get_store
from models import Principal, TeamPermission, TeamPermissionGrant

router = APIRouter(
    prefix="/team-permissions",
    tags=["Team Permissions"],
)


@router.get("", response_model=List[TeamPermission])
def list_team_permissions(
    team_id: Optional[str] = Query(None),
    principal: Principal = Depends(get_admin_principal),
    store: AccessStore = Depends(get_store),
):
    return store.list_team_permissions([team_id] if team_id else None)


@router.post("", response_model=TeamPermission)
def grant_team_permission(
    payload: TeamPermissionGrant,
    principal: Principal = Depends(get_admin_principal),
    service: AccessService = Depends(get_access_service),
):
    return service.grant_team_permission(principal, payload.team_id, payload.permission_id)


@router.delete("/{team_id}/{permission_id}")
def revoke_team_permission(
    team_id: str,
    permission_id: str,
    principal: Principal = Depends(get_admin_principal),
    service: AccessService = Depends(get_access_service),
):
    service.revoke_team_permission(principal, team_id, permission_id)
    return {"success": True}
