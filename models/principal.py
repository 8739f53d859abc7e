# models/principal.py

from typing import FrozenSet, Optional, Tuple
from pydantic import BaseModel
from models.enums import PrincipalKind, ADMIN_KINDS


# ===============================================================
# SCOPE
# ===============================================================
class Scope(BaseModel):
    """
    Organizational reach of a principal.

    unrestricted=True   → every panchayath (admins)
    panchayath_id set   → exactly that panchayath
    neither             → nothing (anonymous, or a session missing its scope)
    """
    unrestricted: bool = False
    panchayath_id: Optional[str] = None

    model_config = {"frozen": True}

    @classmethod
    def everything(cls) -> "Scope":
        return cls(unrestricted=True)

    @classmethod
    def panchayath(cls, panchayath_id: Optional[str]) -> "Scope":
        return cls(panchayath_id=panchayath_id or None)

    @classmethod
    def nothing(cls) -> "Scope":
        return cls()

    def covers(self, panchayath_id: Optional[str]) -> bool:
        if self.unrestricted:
            return True
        return self.panchayath_id is not None and panchayath_id == self.panchayath_id


# ===============================================================
# PRINCIPAL
# ===============================================================
class Principal(BaseModel):
    """
    The authenticated actor. Built once per request from the session and
    never mutated; `with_capabilities` returns a resolved copy.
    """
    kind: PrincipalKind
    id: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    scope: Scope = Scope()
    authenticated: bool = False

    # Unresolved grant reference
    agent_id: Optional[str] = None
    team_ids: Tuple[str, ...] = ()
    team_name: Optional[str] = None

    # None until the permission aggregator has run
    capabilities: Optional[FrozenSet[str]] = None

    model_config = {"frozen": True}

    @property
    def is_admin(self) -> bool:
        return self.kind in ADMIN_KINDS

    @property
    def cache_key(self) -> str:
        return f"{self.kind}:{self.id or self.agent_id or 'anonymous'}"

    def with_capabilities(self, capabilities) -> "Principal":
        return self.model_copy(update={"capabilities": frozenset(capabilities)})


def anonymous() -> Principal:
    return Principal(
        kind=PrincipalKind.guest,
        scope=Scope.nothing(),
        authenticated=False,
        capabilities=frozenset(),
    )
