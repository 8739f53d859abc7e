# dependencies/auth.py

import json
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from core.access_service import AccessService
from core.identity import SessionContext, resolve_principal
from core.logging_config import logger
from core.permission_helpers import authorize
from core.store import AccessStore
from models.principal import Principal


# ============================================================
# Shared store / service
# ============================================================
@lru_cache(maxsize=1)
def get_access_service() -> AccessService:
    return AccessService(AccessStore())


def get_store(service: AccessService = Depends(get_access_service)) -> AccessStore:
    return service.store


# ============================================================
# Session decoding
#
# The console keeps one JSON blob per login flow and forwards them
# as headers. A blob that does not parse to an object is ignored.
# ============================================================
def _decode_blob(raw: Optional[str], header: str) -> Optional[dict]:
    if not raw:
        return None
    try:
        blob = json.loads(raw)
    except ValueError:
        logger.warning(f"Ignoring malformed {header} header")
        return None
    if not isinstance(blob, dict):
        logger.warning(f"Ignoring non-object {header} header")
        return None
    return blob


def get_session_context(
    x_admin_session: Optional[str] = Header(None),
    x_member_session: Optional[str] = Header(None),
    x_guest_session: Optional[str] = Header(None),
) -> SessionContext:
    return SessionContext(
        admin_session=_decode_blob(x_admin_session, "X-Admin-Session"),
        member_session=_decode_blob(x_member_session, "X-Member-Session"),
        guest_session=_decode_blob(x_guest_session, "X-Guest-Session"),
    )


# ============================================================
# Current principal (identity + resolved capabilities)
# ============================================================
def get_current_principal(
    session: SessionContext = Depends(get_session_context),
    store: AccessStore = Depends(get_store),
) -> Principal:
    return authorize(resolve_principal(session), store)


def get_authenticated_principal(
    principal: Principal = Depends(get_current_principal),
) -> Principal:
    if not principal.authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Login required",
        )
    return principal


def get_admin_principal(
    principal: Principal = Depends(get_authenticated_principal),
) -> Principal:
    if not principal.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return principal
