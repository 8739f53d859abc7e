# core/permission_helpers.py

from typing import FrozenSet, Iterable, List, Sequence

from fastapi import Depends, HTTPException

from core.cache import cache_generation, cache_get, cache_set_if_generation, capability_cache_key
from core.capabilities import (
    ALL_CAPABILITIES,
    SECTION_REGISTRY,
    WILDCARD,
    Section,
    capability_key,
)
from core.config import settings
from core.errors import StoreUnavailable
from core.logging_config import logger
from core.notifications import notify_error
from models.enums import PrincipalKind
from models.principal import Principal


# -----------------------------------------------------
# Permission aggregation
#
#   • admin / super_admin   → "*" (no store call)
#   • team_member_admin     → team grants ∪ direct grants
#   • member / guest        → configured default set
#   • anonymous             → nothing
#
# Keys are permission_name values of active permissions only.
# -----------------------------------------------------
def _active_names(store, permission_ids: Iterable[str]) -> FrozenSet[str]:
    permissions = store.get_permissions(permission_ids)
    return frozenset(p.permission_name for p in permissions if p.is_active)


def _team_member_capabilities(principal: Principal, store) -> FrozenSet[str]:
    team_ids: List[str] = list(principal.team_ids)
    if principal.agent_id:
        team_ids.extend(store.list_agent_team_ids(principal.agent_id))

    permission_ids = set()
    if team_ids:
        permission_ids.update(g.permission_id for g in store.list_team_permissions(team_ids))

    if principal.id:
        permission_ids.update(g.permission_id for g in store.list_user_permissions(principal.id))

    return _active_names(store, permission_ids)


def _resolve(principal: Principal, store) -> FrozenSet[str]:
    if principal.is_admin:
        return ALL_CAPABILITIES

    if not principal.authenticated:
        return frozenset()

    if principal.kind == PrincipalKind.team_member_admin:
        return _team_member_capabilities(principal, store)

    return frozenset(k for k in map(capability_key, settings.MEMBER_DEFAULT_CAPABILITIES) if k)


def _fail_closed(principal: Principal, error: StoreUnavailable) -> FrozenSet[str]:
    logger.warning(f"Capability resolution failed for {principal.cache_key}: {error.detail or error}")
    notify_error(
        "Permissions unavailable",
        "Could not load your permissions. Access is limited until they load.",
    )
    return frozenset()


def resolve_capabilities(principal: Principal, store) -> FrozenSet[str]:
    """
    Compute the capability keys held by `principal`.

    Fails closed: if the store cannot be read, the result is the empty set
    and the failure is reported to the user as a notification.
    """
    try:
        return _resolve(principal, store)
    except StoreUnavailable as e:
        return _fail_closed(principal, e)


def authorize(principal: Principal, store) -> Principal:
    """
    Return `principal` with its capability set resolved, using the cache.
    Only team member admins hit the store, so only they are cached.
    Fail-closed results are not cached so the next request retries, and
    neither is a set read before a grant change invalidated the cache.
    """
    if principal.kind != PrincipalKind.team_member_admin:
        return principal.with_capabilities(resolve_capabilities(principal, store))

    key = capability_cache_key(principal.cache_key)
    cached = cache_get(key)
    if cached is not None:
        return principal.with_capabilities(cached)

    generation = cache_generation()
    try:
        capabilities = _resolve(principal, store)
    except StoreUnavailable as e:
        return principal.with_capabilities(_fail_closed(principal, e))

    if not cache_set_if_generation(key, capabilities, settings.CAPABILITY_CACHE_TTL_SECONDS, generation):
        logger.debug(f"Grants changed while resolving {principal.cache_key}; not caching")
    return principal.with_capabilities(capabilities)


# -----------------------------------------------------
# Capability gate
# -----------------------------------------------------
def can_access(principal: Principal, capability) -> bool:
    """
    True iff the principal holds `capability`. Admins hold everything,
    including keys nobody registered. Unknown keys and unresolved
    principals are denied; this never raises.
    """
    if principal.is_admin:
        return True

    key = capability_key(capability)
    if key is None or key == WILDCARD:
        return False

    return key in (principal.capabilities or ())


def visible_sections(principal: Principal, registry: Sequence[Section] = SECTION_REGISTRY) -> List[Section]:
    """
    Console sections the principal may open, in registry order. Sections
    without a required capability are shown to every authenticated
    principal.
    """
    if not principal.authenticated:
        return []

    return [
        section for section in registry
        if section.required_capability is None
        or can_access(principal, section.required_capability)
    ]


# -----------------------------------------------------
# FastAPI dependency wrappers
# -----------------------------------------------------
def requires_capability(capability):
    """
    Usage:
        @router.get("/", dependencies=[Depends(requires_capability(Capability.task_management))])
    """
    from dependencies.auth import get_authenticated_principal

    def dependency(principal: Principal = Depends(get_authenticated_principal)) -> Principal:
        if not can_access(principal, capability):
            raise HTTPException(
                status_code=403,
                detail=f"Insufficient permissions: '{capability}' required",
            )
        return principal

    return dependency


def require_admin(principal: Principal):
    """Raise if the principal is not admin/super_admin."""
    if not principal.is_admin:
        raise HTTPException(
            status_code=403,
            detail="Admin or super_admin role required",
        )
