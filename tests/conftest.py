import pytest
from fastapi.testclient import TestClient

from churchecker.config.settings import settings
from churchecker.database.supabase_client import get_supabase, get_session_client_factory
from churchecker.main import app
from churchecker.modules.auth import service as auth_service
from churchecker.modules.verses.gemini_client import GeminiClient
from churchecker.modules.verses.routes import get_gemini_client
from tests.fakes import FakeSupabase, FakeUser

OWNER_ID = "00000000-0000-0000-0000-00000000000a"
ADMIN_ID = "00000000-0000-0000-0000-00000000000b"
TEACHER_ID = "00000000-0000-0000-0000-00000000000c"
MEMBER_ID = "00000000-0000-0000-0000-00000000000d"
OUTSIDER_ID = "00000000-0000-0000-0000-00000000000e"

USER_NAMES = {
    OWNER_ID: "김목사",
    ADMIN_ID: "이관리",
    TEACHER_ID: "박교사",
    MEMBER_ID: "최성도",
    OUTSIDER_ID: "정손님",
}


def headers_for(user_id: str) -> dict:
    return {"Authorization": f"Bearer token-{user_id}"}


@pytest.fixture
def fake():
    db = FakeSupabase()
    for user_id, name in USER_NAMES.items():
        db.auth.add_token(f"token-{user_id}", FakeUser(id=user_id, email=f"{user_id[-1]}@example.com"))
        db.seed("profiles", {"id": user_id, "name": name})
    return db


@pytest.fixture
def church(fake):
    """Church owned by OWNER_ID with one admin, one teacher and one member"""
    church = fake.seed("churches", {"name": "은혜교회", "description": None, "owner_id": OWNER_ID})[0]
    fake.seed(
        "church_members",
        {"church_id": church["id"], "user_id": OWNER_ID, "role": "admin"},
        {"church_id": church["id"], "user_id": ADMIN_ID, "role": "admin"},
        {"church_id": church["id"], "user_id": TEACHER_ID, "role": "teacher"},
        {"church_id": church["id"], "user_id": MEMBER_ID, "role": "member"},
    )
    return church


@pytest.fixture
def client(fake):
    auth_service._AUTH_USER_CACHE.clear()
    app.dependency_overrides[get_supabase] = lambda: fake
    app.dependency_overrides[get_session_client_factory] = lambda: (lambda: fake)
    app.dependency_overrides[get_gemini_client] = lambda: GeminiClient(api_key="")
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    auth_service._AUTH_USER_CACHE.clear()


@pytest.fixture
def service_role(monkeypatch):
    monkeypatch.setattr(settings, "supabase_service_role_key", "service-role-key")
