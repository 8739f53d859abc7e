# routers/notes.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from core.access_service import AccessService
from core.capabilities import Capability
from core.permission_helpers import requires_capability
from core.store import AccessStore
from dependencies.auth import get_access_service, get_store
from models import Note, NoteCategory, NoteCreate, NoteUpdate, Principal

router = APIRouter(
    prefix="/notes",
    tags=["Panchayath Notes"],
)

notes_access = requires_capability(Capability.panchayath_notes)


@router.get("", response_model=List[Note])
def list_notes(
    panchayath_id: Optional[str] = Query(None),
    category: Optional[NoteCategory] = Query(None),
    principal: Principal = Depends(notes_access),
    store: AccessStore = Depends(get_store),
):
    notes = store.list_notes(principal, panchayath_id)
    if category:
        notes = [n for n in notes if n.category == category]
    return notes


@router.post("", response_model=Note)
def create_note(
    payload: NoteCreate,
    principal: Principal = Depends(notes_access),
    service: AccessService = Depends(get_access_service),
):
    return service.create_note(principal, payload)


@router.patch("/{note_id}", response_model=Note)
def update_note(
    note_id: str,
    payload: NoteUpdate,
    principal: Principal = Depends(notes_access),
    service: AccessService = Depends(get_access_service),
):
    return service.update_note(principal, note_id, payload.note)


@router.delete("/{note_id}")
def delete_note(
    note_id: str,
    principal: Principal = Depends(notes_access),
    service: AccessService = Depends(get_access_service),
):
    service.delete_note(principal, note_id)
    return {"success": True}
