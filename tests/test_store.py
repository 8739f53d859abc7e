# tests/test_store.py

"""
Tests for the Supabase store boundary: grant validation and error mapping.
"""

import pytest

from core.errors import (
    InvalidGrant,
    NotFound,
    StoreUnavailable,
    extract_supabase_error,
    handle_supabase_error,
)
from core.store import AccessStore
from models import PermissionCreate, PermissionUpdate


class FakeAPIError(Exception):
    def __init__(self, message):
        super().__init__(message)
        self.message = message


def test_grant_team_permission_records_grantor(store):
    grant = store.grant_team_permission("t-audit", "perm-mm", granted_by="admin-1")

    assert grant.team_id == "t-audit"
    assert grant.granted_by == "admin-1"
    assert [g.permission_id for g in store.list_team_permissions(["t-audit"])] == ["perm-mm"]


def test_grant_rejects_duplicates_and_dangling_references(store):
    with pytest.raises(InvalidGrant):
        store.grant_team_permission("t-field", "perm-hv")
    with pytest.raises(InvalidGrant):
        store.grant_team_permission("t-missing", "perm-hv")
    with pytest.raises(InvalidGrant):
        store.grant_team_permission("t-field", "perm-missing")
    with pytest.raises(InvalidGrant):
        store.grant_user_permission("nobody", "perm-hv")


def test_inactive_permission_cannot_be_granted_but_is_listed(store):
    with pytest.raises(InvalidGrant):
        store.grant_user_permission("admin-1", "perm-chat")

    names = [p.permission_name for p in store.list_permissions()]
    assert "chat" in names
    assert "chat" not in [p.permission_name for p in store.list_permissions(active_only=True)]


def test_user_grants_round_trip(store):
    grant = store.grant_user_permission("admin-1", "perm-settings")
    assert [g.id for g in store.list_user_permissions("admin-1")] == [grant.id]

    store.revoke_user_permission(grant.id)
    assert store.list_user_permissions("admin-1") == []

    with pytest.raises(NotFound):
        store.revoke_user_permission(grant.id)


def test_duplicate_permission_name(store):
    with pytest.raises(InvalidGrant):
        store.create_permission(PermissionCreate(permission_name=" settings "))


def test_team_membership(store):
    store.add_team_member("t-audit", "a-ravi")
    assert "t-audit" in store.list_agent_team_ids("a-ravi")

    with pytest.raises(InvalidGrant):
        store.add_team_member("t-audit", "a-ravi")
    with pytest.raises(NotFound):
        store.add_team_member("t-audit", "a-nobody")

    store.remove_team_member("t-audit", "a-ravi")
    with pytest.raises(NotFound):
        store.remove_team_member("t-audit", "a-ravi")


def test_get_permissions_skips_round_trip_for_empty_ids(store, fake_db):
    fake_db.fail = True
    assert store.get_permissions([]) == []
    assert store.list_team_permissions([]) == []


def test_client_failure_is_store_unavailable(store, fake_db):
    fake_db.fail = True
    with pytest.raises(StoreUnavailable):
        store.list_teams()


def test_unconfigured_client_is_store_unavailable(monkeypatch):
    monkeypatch.setattr("core.store.get_supabase_client", lambda: None)
    with pytest.raises(StoreUnavailable):
        AccessStore().list_permissions()


@pytest.mark.parametrize("message, expected", [
    ('duplicate key value violates unique constraint "team_permissions_pkey"', InvalidGrant),
    ("insert or update violates foreign key constraint", InvalidGrant),
    ("connection reset by peer", StoreUnavailable),
])
def test_handle_supabase_error_mapping(message, expected):
    error = handle_supabase_error(FakeAPIError(message), "Failed to grant")
    assert isinstance(error, expected)
    assert error.detail == message


def test_extract_supabase_error_falls_back_to_args():
    assert extract_supabase_error(ValueError("boom")) == "boom"
    assert extract_supabase_error(FakeAPIError("api says no")) == "api says no"


def test_rename_to_existing_permission_name_is_rejected(store):
    with pytest.raises(InvalidGrant):
        store.update_permission("perm-tm", PermissionUpdate(permission_name="hierarchy_view"))

    names = [p.permission_name for p in store.list_permissions()]
    assert names.count("hierarchy_view") == 1

    # Keeping its own name is not a clash.
    renamed = store.update_permission("perm-tm", PermissionUpdate(permission_name="task_management", category="ops"))
    assert renamed.category == "ops"
