# routers/panchayaths.py

from typing import List

from fastapi import APIRouter, Depends

from core.access_service import AccessService
from core.capabilities import Capability
from core.permission_helpers import requires_capability
from core.store import AccessStore
from dependencies.auth import get_access_service, get_authenticated_principal, get_store
from models import Panchayath, PanchayathCreate, Principal

router = APIRouter(
    prefix="/panchayaths",
    tags=["Panchayaths"],
)


@router.get("", response_model=List[Panchayath])
def list_panchayaths(
    principal: Principal = Depends(get_authenticated_principal),
    store: AccessStore = Depends(get_store),
):
    """Panchayaths in the caller's scope, ordered by name."""
    return store.list_panchayaths(principal)


@router.post("", response_model=Panchayath)
def create_panchayath(
    payload: PanchayathCreate,
    principal: Principal = Depends(requires_capability(Capability.settings)),
    service: AccessService = Depends(get_access_service),
):
    return service.create_panchayath(principal, payload)
