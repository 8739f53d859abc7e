# routers/registrations.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from core.access_service import AccessService
from core.capabilities import Capability
from core.permission_helpers import requires_capability
from core.store import AccessStore
from dependencies.auth import get_access_service, get_store
from models import Principal, RegistrationRequest, RegistrationStatus

router = APIRouter(
    prefix="/registrations",
    tags=["Member Approvals"],
)

approvals_access = requires_capability(Capability.member_management)


@router.get("", response_model=List[RegistrationRequest])
def list_registrations(
    status: Optional[RegistrationStatus] = Query(None),
    principal: Principal = Depends(approvals_access),
    store: AccessStore = Depends(get_store),
):
    return store.list_registrations(principal, status)


@router.post("/{registration_id}/approve", response_model=RegistrationRequest)
def approve_registration(
    registration_id: str,
    principal: Principal = Depends(approvals_access),
    service: AccessService = Depends(get_access_service),
):
    return service.decide_registration(principal, registration_id, RegistrationStatus.approved)


@router.post("/{registration_id}/reject", response_model=RegistrationRequest)
def reject_registration(
    registration_id: str,
    principal: Principal = Depends(approvals_access),
    service: AccessService = Depends(get_access_service),
):
    return service.decide_registration(principal, registration_id, RegistrationStatus.rejected)
