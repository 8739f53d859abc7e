# core/identity.py

"""
Identity resolution.

The login flows (admin, team member, member, guest) each persist a session
blob. Every request hands those blobs to `resolve_principal` through an
explicit `SessionContext`; nothing else reads session state.
"""

from typing import Any, Mapping, Optional, Tuple

from pydantic import BaseModel

from core.logging_config import logger
from models.enums import PrincipalKind
from models.principal import Principal, Scope, anonymous


TEAM_ADMIN_ID_PREFIX = "team_"


class SessionContext(BaseModel):
    admin_session: Optional[dict] = None
    member_session: Optional[dict] = None
    guest_session: Optional[dict] = None

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return not (self.admin_session or self.member_session or self.guest_session)


# ============================================================
# Helpers
# ============================================================
def _text(blob: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = blob.get(key)
        if value not in (None, ""):
            return str(value)
    return None


def _team_ids(blob: Mapping[str, Any]) -> Tuple[str, ...]:
    raw = blob.get("team_ids")
    if not isinstance(raw, (list, tuple)):
        raw = [blob.get("team_id")]
    return tuple(dict.fromkeys(str(t) for t in raw if t))


def _agent_id(blob: Mapping[str, Any]) -> Optional[str]:
    agent_id = _text(blob, "agent_id")
    if agent_id:
        return agent_id

    session_id = _text(blob, "id") or ""
    if session_id.startswith(TEAM_ADMIN_ID_PREFIX):
        return session_id[len(TEAM_ADMIN_ID_PREFIX):] or None
    return None


# ============================================================
# Per-blob resolution
# ============================================================
def _from_admin_session(blob: Mapping[str, Any]) -> Optional[Principal]:
    role = blob.get("role")

    if role in (PrincipalKind.super_admin, PrincipalKind.admin):
        return Principal(
            kind=PrincipalKind(role),
            id=_text(blob, "id"),
            name=_text(blob, "username", "name"),
            phone=_text(blob, "phone"),
            scope=Scope.everything(),
            authenticated=True,
        )

    if role == PrincipalKind.team_member_admin:
        return Principal(
            kind=PrincipalKind.team_member_admin,
            id=_text(blob, "id"),
            name=_text(blob, "username", "name"),
            phone=_text(blob, "phone"),
            scope=Scope.panchayath(_text(blob, "panchayath_id")),
            authenticated=True,
            agent_id=_agent_id(blob),
            team_ids=_team_ids(blob),
            team_name=_text(blob, "team_name"),
        )

    logger.warning(f"Ignoring admin session with unknown role: {role!r}")
    return None


def _from_member_session(blob: Mapping[str, Any]) -> Principal:
    return Principal(
        kind=PrincipalKind.member,
        id=_text(blob, "id"),
        name=_text(blob, "name", "username"),
        phone=_text(blob, "mobileNumber", "mobile_number", "phone"),
        scope=Scope.panchayath(_text(blob, "panchayath_id")),
        authenticated=True,
    )


def _from_guest_session(blob: Mapping[str, Any]) -> Principal:
    return Principal(
        kind=PrincipalKind.guest,
        id=_text(blob, "id"),
        name=_text(blob, "name", "username"),
        phone=_text(blob, "mobileNumber", "mobile_number", "phone"),
        scope=Scope.panchayath(_text(blob, "panchayath_id")),
        authenticated=True,
    )


# ============================================================
# Public entry point
# ============================================================
def resolve_principal(session: SessionContext) -> Principal:
    """
    Build the request principal from the session blobs.

    Precedence is admin > member > guest. With no usable session the
    anonymous guest is returned (no scope, no capabilities); the caller
    decides whether to demand a login.
    """
    if session.admin_session:
        principal = _from_admin_session(session.admin_session)
        if principal is not None:
            return principal

    if session.member_session:
        return _from_member_session(session.member_session)

    if session.guest_session:
        return _from_guest_session(session.guest_session)

    return anonymous()
