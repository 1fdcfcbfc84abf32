import pytest
from fastapi import HTTPException

from churchecker.config.roles_config import capabilities_for, role_label
from churchecker.core.dependencies import ChurchAccess, is_church_admin, resolve_church_access
from tests.conftest import ADMIN_ID, MEMBER_ID, OUTSIDER_ID, OWNER_ID, TEACHER_ID, headers_for


@pytest.mark.parametrize("is_owner,role,expected", [
    (True, "admin", True),
    (True, None, True),
    (False, "admin", True),
    (False, None, False),
])
def test_is_church_admin_owner_or_admin_role(is_owner, role, expected):
    owner_id = "u1" if is_owner else "someone-else"
    assert is_church_admin(owner_id, role, "u1") is expected


@pytest.mark.parametrize("role", ["member", "teacher"])
def test_non_admin_roles_are_not_admin(role):
    assert is_church_admin("owner", role, "u1") is False


def test_owner_without_membership_row_is_admin_member():
    access = ChurchAccess(church={"id": "c1", "owner_id": "u1"}, user_id="u1", role=None)
    assert access.is_owner
    assert access.is_member
    assert access.is_admin
    assert access.effective_role == "admin"
    assert access.can("church:manage")


def test_capabilities_by_role():
    assert "attendance:check" in capabilities_for("teacher")
    assert "people:write" in capabilities_for("teacher")
    assert "ledger:write" not in capabilities_for("teacher")
    assert capabilities_for("member") == frozenset({"announcements:comment", "prayers:write"})
    assert capabilities_for(None) == frozenset()
    assert capabilities_for("unknown") == frozenset()


def test_role_labels():
    assert role_label("admin") == "관리자"
    assert role_label("teacher") == "교사"
    assert role_label("member") == "멤버"
    assert role_label(None) == "멤버"


def test_resolve_church_access_is_cached_per_request(fake, church):
    cache = {}
    first = resolve_church_access(church["id"], {"id": TEACHER_ID}, fake, cache)
    fake.tables["church_members"] = []
    second = resolve_church_access(church["id"], {"id": TEACHER_ID}, fake, cache)
    assert first is second
    assert second.role == "teacher"


def test_resolve_church_access_missing_church_is_404(fake):
    with pytest.raises(HTTPException) as exc:
        resolve_church_access("missing", {"id": OWNER_ID}, fake)
    assert exc.value.status_code == 404


def test_missing_token_is_rejected(client, church):
    response = client.get(f"/api/v1/churches/{church['id']}")
    assert response.status_code in (401, 403)


def test_invalid_token_is_401(client, church):
    response = client.get(f"/api/v1/churches/{church['id']}", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


def test_outsider_cannot_read_church(client, church):
    response = client.get(f"/api/v1/churches/{church['id']}", headers=headers_for(OUTSIDER_ID))
    assert response.status_code == 403


def test_member_cannot_update_church(client, church):
    response = client.put(
        f"/api/v1/churches/{church['id']}",
        json={"name": "새 이름"},
        headers=headers_for(MEMBER_ID),
    )
    assert response.status_code == 403


def test_admin_member_can_update_church(client, church):
    response = client.put(
        f"/api/v1/churches/{church['id']}",
        json={"name": "새 이름"},
        headers=headers_for(ADMIN_ID),
    )
    assert response.status_code == 200
    assert response.json()["name"] == "새 이름"


def test_church_detail_reports_caller_access(client, church):
    response = client.get(f"/api/v1/churches/{church['id']}", headers=headers_for(TEACHER_ID))
    assert response.status_code == 200
    body = response.json()
    assert body["my_role"] == "teacher"
    assert body["is_admin"] is False
    assert "attendance:check" in body["capabilities"]
