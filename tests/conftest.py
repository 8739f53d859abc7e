# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.
"""

import json

import pytest
from fastapi.testclient import TestClient
from typing import Generator

from core.access_service import AccessService
from core.store import AccessStore
from dependencies.auth import get_access_service
from main import create_app
from tests.fake_supabase import FakeSupabase


# ------------------------------------------------------------------
# Seed data
#   Kodur: 1 coordinator, 1 supervisor, 2 pro (Ravi + an orphan)
#   Alur:  1 coordinator, 1 group leader with a mis-ranked superior
# ------------------------------------------------------------------
SEED = {
    "panchayaths": [
        {"id": "p-kodur", "name": "Kodur", "district": "Malappuram", "state": "Kerala"},
        {"id": "p-alur", "name": "Alur", "district": "Thrissur", "state": "Kerala"},
    ],
    "agents": [
        {"id": "a-lakshmi", "name": "Lakshmi", "role": "coordinator", "panchayath_id": "p-kodur",
         "phone": "9000000001", "ward": "1"},
        {"id": "a-suresh", "name": "Suresh", "role": "supervisor", "panchayath_id": "p-kodur",
         "superior_id": "a-lakshmi", "phone": "9000000002", "ward": "2"},
        {"id": "a-ravi", "name": "Ravi", "role": "pro", "panchayath_id": "p-kodur",
         "phone": "9876543210", "ward": "3"},
        {"id": "a-anil", "name": "Anil", "role": "pro", "panchayath_id": "p-kodur",
         "superior_id": "a-deleted", "phone": "9000000004", "ward": "4"},
        {"id": "a-meera", "name": "Meera", "role": "coordinator", "panchayath_id": "p-alur",
         "phone": "9123400000", "ward": "7"},
        {"id": "a-joseph", "name": "Joseph", "role": "group-leader", "panchayath_id": "p-alur",
         "superior_id": "a-meera", "phone": "9123400001", "ward": "8"},
    ],
    "management_teams": [
        {"id": "t-field", "name": "Field Ops", "is_active": True},
        {"id": "t-outreach", "name": "Outreach", "is_active": True},
        {"id": "t-audit", "name": "Audit", "is_active": True},
    ],
    "management_team_members": [
        {"id": "m-1", "team_id": "t-field", "agent_id": "a-ravi"},
        {"id": "m-2", "team_id": "t-outreach", "agent_id": "a-ravi"},
        {"id": "m-3", "team_id": "t-audit", "agent_id": "a-suresh"},
    ],
    "admin_permissions": [
        {"id": "perm-hv", "permission_name": "hierarchy_view", "category": "view", "is_active": True},
        {"id": "perm-tm", "permission_name": "task_management", "category": "manage", "is_active": True},
        {"id": "perm-notes", "permission_name": "panchayath_notes", "category": "manage", "is_active": True},
        {"id": "perm-mm", "permission_name": "member_management", "category": "manage", "is_active": True},
        {"id": "perm-settings", "permission_name": "settings", "category": "manage", "is_active": True},
        {"id": "perm-chat", "permission_name": "chat", "category": "comms", "is_active": False},
    ],
    "team_permissions": [
        {"id": "tp-1", "team_id": "t-field", "permission_id": "perm-hv"},
        {"id": "tp-2", "team_id": "t-field", "permission_id": "perm-tm"},
        {"id": "tp-3", "team_id": "t-outreach", "permission_id": "perm-chat"},
    ],
    "admin_users": [
        {"id": "admin-1", "username": "root"},
    ],
    "admin_role_permissions": [],
    "panchayath_notes": [
        {"id": "n-kodur", "panchayath_id": "p-kodur", "category": "panchayath", "note": "Ward meeting on Friday"},
        {"id": "n-alur", "panchayath_id": "p-alur", "category": None, "note": "New coordinator"},
    ],
    "tasks": [
        {"id": "task-1", "title": "Survey ward 3", "panchayath_id": "p-kodur", "allocated_to_team": "t-field"},
        {"id": "task-2", "title": "Collect forms", "panchayath_id": "p-alur", "allocated_to_team": "t-audit"},
    ],
    "user_registration_requests": [
        {"id": "r-1", "username": "Lakshmi", "mobile_number": "9000000001", "panchayath_id": "p-kodur", "status": "pending"},
        {"id": "r-2", "username": "Meera", "mobile_number": "9123400000", "panchayath_id": "p-alur", "status": "pending"},
    ],
}

RAVI_SESSION = {
    "id": "team_a-ravi",
    "username": "Ravi",
    "role": "team_member_admin",
    "phone": "9876543210",
    "team_id": "t-field",
    "team_name": "Field Ops",
    "panchayath_id": "p-kodur",
}

ADMIN_SESSION = {"id": "admin-1", "username": "root", "role": "admin"}

KODUR_GUEST_SESSION = {"id": "g-1", "name": "Visitor", "panchayath_id": "p-kodur"}


def session_headers(admin=None, member=None, guest=None) -> dict:
    headers = {}
    if admin is not None:
        headers["X-Admin-Session"] = json.dumps(admin)
    if member is not None:
        headers["X-Member-Session"] = json.dumps(member)
    if guest is not None:
        headers["X-Guest-Session"] = json.dumps(guest)
    return headers


# ------------------------------------------------------------------
# Fixtures
# ------------------------------------------------------------------
@pytest.fixture
def fake_db() -> FakeSupabase:
    return FakeSupabase(SEED)


@pytest.fixture
def store(fake_db) -> AccessStore:
    return AccessStore(fake_db)


@pytest.fixture
def service(store) -> AccessService:
    return AccessService(store)


@pytest.fixture(scope="function")
def app(service):
    """Create a test FastAPI application wired to the fake store."""
    application = create_app()
    application.dependency_overrides[get_access_service] = lambda: service
    return application


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def reset_cache():
    """Reset cache before each test."""
    from core.cache import cache_clear
    cache_clear()
    yield
    cache_clear()
