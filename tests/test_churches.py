from tests.conftest import ADMIN_ID, MEMBER_ID, OUTSIDER_ID, OWNER_ID, TEACHER_ID, headers_for


def test_create_church_makes_creator_admin_member(client, fake):
    response = client.post(
        "/api/v1/churches",
        json={"name": "  Youth Group  ", "description": "청년부"},
        headers=headers_for(OUTSIDER_ID),
    )
    assert response.status_code == 201
    church = response.json()
    assert church["name"] == "Youth Group"
    assert church["owner_id"] == OUTSIDER_ID

    members = fake.rows("church_members", church_id=church["id"])
    assert [(m["user_id"], m["role"]) for m in members] == [(OUTSIDER_ID, "admin")]


def test_church_and_owner_membership_written_by_one_rpc(client, fake):
    # atomicity comes from the create_church_with_owner SQL function; the service must not split the writes
    response = client.post("/api/v1/churches", json={"name": "Youth Group"}, headers=headers_for(OUTSIDER_ID))
    assert response.status_code == 201
    assert [name for name, _ in fake.rpc_calls] == ["create_church_with_owner"]
    writes = [(table, op) for table, op in fake.executed if op != "select"]
    assert ("churches", "insert") not in writes
    assert ("church_members", "insert") not in writes


def test_failed_membership_insert_leaves_no_orphan_church(client, fake):
    # only exercises the fake function's rollback; the real guarantee is the SQL transaction
    fake.fail_on("church_members", "insert")
    response = client.post("/api/v1/churches", json={"name": "Youth Group"}, headers=headers_for(OUTSIDER_ID))
    assert response.status_code == 500
    assert fake.rows("churches", owner_id=OUTSIDER_ID) == []
    assert len(fake.rpc_calls) == 1


def test_create_church_rejects_blank_name(client):
    response = client.post("/api/v1/churches", json={"name": ""}, headers=headers_for(OUTSIDER_ID))
    assert response.status_code == 422


def test_list_churches_includes_role(client, church):
    response = client.get("/api/v1/churches", headers=headers_for(TEACHER_ID))
    assert response.status_code == 200
    [entry] = response.json()
    assert entry["id"] == church["id"]
    assert entry["my_role"] == "teacher"
    assert entry["is_owner"] is False

    response = client.get("/api/v1/churches", headers=headers_for(OUTSIDER_ID))
    assert response.json() == []


def test_list_members_with_names_and_role_filter(client, church):
    response = client.get(f"/api/v1/churches/{church['id']}/members", headers=headers_for(MEMBER_ID))
    assert response.status_code == 200
    members = response.json()
    assert len(members) == 4
    owner = next(m for m in members if m["user_id"] == OWNER_ID)
    assert owner["is_owner"] is True
    assert owner["name"] == "김목사"

    response = client.get(
        f"/api/v1/churches/{church['id']}/members",
        params={"role": "teacher"},
        headers=headers_for(MEMBER_ID),
    )
    assert [m["user_id"] for m in response.json()] == [TEACHER_ID]


def test_role_change_is_recorded(client, fake, church):
    member = fake.rows("church_members", church_id=church["id"], user_id=MEMBER_ID)[0]
    response = client.put(
        f"/api/v1/churches/{church['id']}/members/{member['id']}",
        json={"role": "teacher"},
        headers=headers_for(ADMIN_ID),
    )
    assert response.status_code == 200
    assert response.json()["role"] == "teacher"

    [entry] = fake.rows("member_role_history", member_id=member["id"])
    assert (entry["old_role"], entry["new_role"], entry["changed_by"]) == ("member", "teacher", ADMIN_ID)

    response = client.get(
        f"/api/v1/churches/{church['id']}/members/{member['id']}/history",
        headers=headers_for(ADMIN_ID),
    )
    assert response.status_code == 200
    history = response.json()
    assert history["role_changes"] == 1
    assert history["history"][0]["changed_by_name"] == "이관리"


def test_owner_cannot_be_demoted_or_removed(client, fake, church):
    owner_row = fake.rows("church_members", church_id=church["id"], user_id=OWNER_ID)[0]
    response = client.put(
        f"/api/v1/churches/{church['id']}/members/{owner_row['id']}",
        json={"role": "member"},
        headers=headers_for(ADMIN_ID),
    )
    assert response.status_code == 400

    response = client.delete(
        f"/api/v1/churches/{church['id']}/members/{owner_row['id']}",
        headers=headers_for(ADMIN_ID),
    )
    assert response.status_code == 400
    assert fake.rows("church_members", id=owner_row["id"])


def test_teacher_cannot_manage_members(client, fake, church):
    member = fake.rows("church_members", church_id=church["id"], user_id=MEMBER_ID)[0]
    response = client.delete(
        f"/api/v1/churches/{church['id']}/members/{member['id']}",
        headers=headers_for(TEACHER_ID),
    )
    assert response.status_code == 403


def test_leave_church(client, fake, church):
    response = client.post(f"/api/v1/churches/{church['id']}/leave", headers=headers_for(MEMBER_ID))
    assert response.status_code == 204
    assert fake.rows("church_members", church_id=church["id"], user_id=MEMBER_ID) == []

    response = client.post(f"/api/v1/churches/{church['id']}/leave", headers=headers_for(OWNER_ID))
    assert response.status_code == 400


def test_delete_church_removes_scoped_rows(client, fake, church):
    person = fake.seed("students", {"church_id": church["id"], "name": "민수"})[0]
    fake.seed("attendance", {"church_id": church["id"], "student_id": person["id"], "date": "2026-10-18"})
    prayer = fake.seed("prayer_requests", {"church_id": church["id"], "title": "t", "content": "c"})[0]
    fake.seed("prayer_comments", {"prayer_id": prayer["id"], "content": "아멘"})

    response = client.delete(f"/api/v1/churches/{church['id']}", headers=headers_for(OWNER_ID))
    assert response.status_code == 204
    assert fake.rows("churches", id=church["id"]) == []
    for table in ("church_members", "students", "attendance", "prayer_requests"):
        assert fake.rows(table, church_id=church["id"]) == []
    assert fake.rows("prayer_comments", prayer_id=prayer["id"]) == []
