# routers/access.py

from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.capabilities import Section
from core.permission_helpers import visible_sections
from dependencies.auth import get_current_principal
from models.principal import Principal

router = APIRouter(
    prefix="/me",
    tags=["Access"],
)


class SectionRead(BaseModel):
    section_id: str
    title: str
    required_capability: Optional[str] = None

    @classmethod
    def from_section(cls, section: Section) -> "SectionRead":
        return cls(
            section_id=section.section_id,
            title=section.title,
            required_capability=str(section.required_capability) if section.required_capability else None,
        )


# -----------------------------------------------------
# GET /me: who the console is talking to
# Anonymous callers get the guest principal back so the
# console can redirect to login.
# -----------------------------------------------------
@router.get("", response_model=Principal)
def read_me(principal: Principal = Depends(get_current_principal)):
    return principal


@router.get("/capabilities", response_model=List[str])
def read_capabilities(principal: Principal = Depends(get_current_principal)):
    return sorted(principal.capabilities or ())


@router.get("/sections", response_model=List[SectionRead])
def read_sections(principal: Principal = Depends(get_current_principal)):
    return [SectionRead.from_section(s) for s in visible_sections(principal)]
