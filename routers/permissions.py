# routers/permissions.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from core.access_service import AccessService
from core.store import AccessStore
from dependencies.auth import get_access_service, get_admin_principal, get_store
from models import (
    Permission,
    PermissionCreate,
    PermissionUpdate,
    Principal,
    UserPermission,
    UserPermissionGrant,
)

router = APIRouter(
    prefix="/permissions",
    tags=["Permissions"],
)


# ============================================================
# PERMISSION DEFINITIONS
# Inactive permissions are listed (so they can be re-enabled)
# unless active_only is set; they never resolve into a capability.
# ============================================================
@router.get("", response_model=List[Permission])
def list_permissions(
    active_only: bool = Query(False),
    principal: Principal = Depends(get_admin_principal),
    store: AccessStore = Depends(get_store),
):
    return store.list_permissions(active_only=active_only)


@router.post("", response_model=Permission)
def create_permission(
    payload: PermissionCreate,
    principal: Principal = Depends(get_admin_principal),
    service: AccessService = Depends(get_access_service),
):
    return service.create_permission(principal, payload)


@router.patch("/{permission_id}", response_model=Permission)
def update_permission(
    permission_id: str,
    payload: PermissionUpdate,
    principal: Principal = Depends(get_admin_principal),
    service: AccessService = Depends(get_access_service),
):
    return service.update_permission(principal, permission_id, payload)


@router.delete("/{permission_id}")
def delete_permission(
    permission_id: str,
    principal: Principal = Depends(get_admin_principal),
    service: AccessService = Depends(get_access_service),
):
    service.delete_permission(principal, permission_id)
    return {"success": True}


# ============================================================
# DIRECT ADMIN GRANTS
# ============================================================
@router.get("/grants", response_model=List[UserPermission])
def list_user_grants(
    admin_user_id: Optional[str] = Query(None),
    principal: Principal = Depends(get_admin_principal),
    store: AccessStore = Depends(get_store),
):
    return store.list_user_permissions(admin_user_id)


@router.post("/grants", response_model=UserPermission)
def grant_user_permission(
    payload: UserPermissionGrant,
    principal: Principal = Depends(get_admin_principal),
    service: AccessService = Depends(get_access_service),
):
    return service.grant_user_permission(principal, payload.admin_user_id, payload.permission_id)


@router.delete("/grants/{grant_id}")
def revoke_user_permission(
    grant_id: str,
    principal: Principal = Depends(get_admin_principal),
    service: AccessService = Depends(get_access_service),
):
    service.revoke_user_permission(principal, grant_id)
    return {"success": True}
