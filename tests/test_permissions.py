# tests/test_permissions.py

"""
Tests for capability resolution and the capability gate.
"""

from unittest.mock import patch

import pytest

from core.capabilities import BASELINE_SECTION, SECTION_REGISTRY, Capability, Section
from core.cache import cache_get, capability_cache_key
from core.errors import StoreUnavailable
from core.identity import SessionContext, resolve_principal
from core.permission_helpers import authorize, can_access, resolve_capabilities, visible_sections
from models import Principal, PrincipalKind, Scope, anonymous
from tests.conftest import ADMIN_SESSION, KODUR_GUEST_SESSION, RAVI_SESSION


def ravi(store):
    return authorize(resolve_principal(SessionContext(admin_session=RAVI_SESSION)), store)


# ------------------------------------------------------------------
# Admins
# ------------------------------------------------------------------
@pytest.mark.parametrize("role", ["admin", "super_admin"])
@pytest.mark.parametrize("key", ["settings", "hierarchy_view", "not_registered_anywhere", "*", ""])
def test_admins_can_access_every_key(store, role, key):
    principal = authorize(resolve_principal(SessionContext(admin_session={"id": "a", "role": role})), store)
    assert can_access(principal, key) is True


def test_admin_resolution_needs_no_store(fake_db, store):
    fake_db.fail = True
    principal = authorize(resolve_principal(SessionContext(admin_session=ADMIN_SESSION)), store)
    assert principal.capabilities == frozenset({"*"})


# ------------------------------------------------------------------
# Team member admins
# ------------------------------------------------------------------
def test_field_ops_scenario(store):
    principal = ravi(store)

    assert principal.capabilities == frozenset({"hierarchy_view", "task_management"})
    assert can_access(principal, Capability.hierarchy_view)
    assert can_access(principal, "task_management")
    assert can_access(principal, "settings") is False


def test_inactive_permission_is_never_resolved(store):
    # Outreach grants "chat", which is inactive.
    assert "chat" not in ravi(store).capabilities


def test_team_without_permissions_contributes_nothing(store):
    session = {"id": "team_a-suresh", "role": "team_member_admin", "panchayath_id": "p-kodur"}
    principal = authorize(resolve_principal(SessionContext(admin_session=session)), store)
    assert principal.capabilities == frozenset()


def test_grant_then_revoke_round_trip(service, store):
    admin = authorize(resolve_principal(SessionContext(admin_session=ADMIN_SESSION)), store)

    service.grant_team_permission(admin, "t-field", "perm-notes")
    assert "panchayath_notes" in ravi(store).capabilities

    service.revoke_team_permission(admin, "t-field", "perm-notes")
    assert "panchayath_notes" not in ravi(store).capabilities


def test_grants_union_across_teams(service, store):
    admin = authorize(resolve_principal(SessionContext(admin_session=ADMIN_SESSION)), store)
    service.grant_team_permission(admin, "t-outreach", "perm-mm")

    assert ravi(store).capabilities == frozenset({"hierarchy_view", "task_management", "member_management"})


def test_direct_grants_are_unioned_with_team_grants(service, store, fake_db):
    fake_db.tables["admin_users"].append({"id": "team_a-ravi", "username": "Ravi"})
    admin = authorize(resolve_principal(SessionContext(admin_session=ADMIN_SESSION)), store)

    service.grant_user_permission(admin, "team_a-ravi", "perm-settings")

    assert "settings" in ravi(store).capabilities


def test_keys_follow_permission_name_not_id(store, fake_db):
    # Re-issuing the permission row under a new id keeps the capability.
    fake_db.tables["admin_permissions"] = [
        {**p, "id": "perm-hv-2"} if p["id"] == "perm-hv" else p
        for p in fake_db.tables["admin_permissions"]
    ]
    fake_db.tables["team_permissions"][0]["permission_id"] = "perm-hv-2"

    assert "hierarchy_view" in ravi(store).capabilities


def test_store_failure_fails_closed(fake_db, store):
    fake_db.fail = True

    with patch("core.permission_helpers.notify_error") as notify:
        principal = ravi(store)

    assert principal.capabilities == frozenset()
    assert can_access(principal, "hierarchy_view") is False
    notify.assert_called_once()
    assert cache_get(capability_cache_key(principal.cache_key)) is None


def test_resolve_capabilities_fails_closed_on_store_error():
    class BrokenStore:
        def list_agent_team_ids(self, agent_id):
            raise StoreUnavailable("down")

    principal = resolve_principal(SessionContext(admin_session=RAVI_SESSION))
    with patch("core.permission_helpers.notify_error"):
        assert resolve_capabilities(principal, BrokenStore()) == frozenset()


def test_revoke_during_resolution_is_not_undone_by_cache(service, store):
    admin = authorize(resolve_principal(SessionContext(admin_session=ADMIN_SESSION)), store)
    original = store.list_team_permissions

    def read_then_revoke(team_ids=None):
        grants = original(team_ids)
        # The revoke commits after this request already read the old grants.
        store.list_team_permissions = original
        service.revoke_team_permission(admin, "t-field", "perm-hv")
        return grants

    store.list_team_permissions = read_then_revoke

    stale = ravi(store)
    assert "hierarchy_view" in stale.capabilities
    assert cache_get(capability_cache_key(stale.cache_key)) is None

    assert "hierarchy_view" not in ravi(store).capabilities


def test_capabilities_are_cached_until_invalidated(service, store, fake_db):
    first = ravi(store)

    # Direct table edit bypasses invalidation; the cached set is served.
    fake_db.tables["team_permissions"].clear()
    assert ravi(store).capabilities == first.capabilities

    admin = authorize(resolve_principal(SessionContext(admin_session=ADMIN_SESSION)), store)
    service.grant_team_permission(admin, "t-field", "perm-notes")
    assert ravi(store).capabilities == frozenset({"panchayath_notes"})


# ------------------------------------------------------------------
# Members / guests
# ------------------------------------------------------------------
def test_members_and_guests_get_default_set(store):
    guest = authorize(resolve_principal(SessionContext(guest_session=KODUR_GUEST_SESSION)), store)
    assert guest.capabilities == frozenset()
    assert can_access(guest, "hierarchy_view") is False


def test_member_default_set_is_configurable(store):
    with patch("core.permission_helpers.settings") as fake_settings:
        fake_settings.MEMBER_DEFAULT_CAPABILITIES = ["reports_view", " "]
        guest = authorize(resolve_principal(SessionContext(guest_session=KODUR_GUEST_SESSION)), store)

    assert guest.capabilities == frozenset({"reports_view"})


# ------------------------------------------------------------------
# Gate edge cases
# ------------------------------------------------------------------
def test_unknown_or_blank_keys_are_denied(store):
    principal = ravi(store)
    for key in ["", None, "*", "no_such_capability"]:
        assert can_access(principal, key) is False


def test_unresolved_principal_is_denied():
    principal = resolve_principal(SessionContext(admin_session=RAVI_SESSION))
    assert can_access(principal, "hierarchy_view") is False


# ------------------------------------------------------------------
# Sections
# ------------------------------------------------------------------
def test_sections_for_field_ops_member(store):
    ids = [s.section_id for s in visible_sections(ravi(store))]
    assert ids == ["dashboard", "tasks", "hierarchy"]


def test_admin_sees_every_section_in_registry_order(store):
    admin = authorize(resolve_principal(SessionContext(admin_session=ADMIN_SESSION)), store)
    assert visible_sections(admin) == list(SECTION_REGISTRY)


def test_shared_capability_sections_keep_registry_order():
    principal = Principal(
        kind=PrincipalKind.team_member_admin,
        id="x",
        scope=Scope.panchayath("p-kodur"),
        authenticated=True,
        capabilities=frozenset({"member_management"}),
    )
    ids = [s.section_id for s in visible_sections(principal)]
    assert ids == ["dashboard", "approvals", "users"]


def test_baseline_only_for_authenticated_principals(store):
    guest = authorize(resolve_principal(SessionContext(guest_session=KODUR_GUEST_SESSION)), store)
    assert visible_sections(guest) == [BASELINE_SECTION]
    assert visible_sections(anonymous()) == []


def test_custom_registry():
    registry = [Section("b", "B", Capability.chat), Section("a", "A", None)]
    principal = Principal(kind=PrincipalKind.member, authenticated=True, capabilities=frozenset({"chat"}))
    assert [s.section_id for s in visible_sections(principal, registry)] == ["b", "a"]
