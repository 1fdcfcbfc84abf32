from tests.conftest import MEMBER_ID, OWNER_ID, TEACHER_ID, headers_for


def people_url(church, suffix=""):
    return f"/api/v1/churches/{church['id']}/people{suffix}"


def test_teacher_registers_person_with_normalized_days(client, church):
    response = client.post(
        people_url(church),
        json={"name": "  민수 ", "age": 12, "grade": "6학년", "attendance_days": [3, 0, 3]},
        headers=headers_for(TEACHER_ID),
    )
    assert response.status_code == 201
    person = response.json()
    assert person["name"] == "민수"
    assert person["attendance_days"] == [0, 3]
    assert person["type"] == "student"
    assert person["registered_by"] == TEACHER_ID


def test_invalid_person_input_is_rejected(client, church):
    for payload in ({"name": "   "}, {"name": "a", "attendance_days": [7]}, {"name": "a", "age": -1}):
        response = client.post(people_url(church), json=payload, headers=headers_for(TEACHER_ID))
        assert response.status_code == 422, payload


def test_member_cannot_register_people(client, church):
    response = client.post(people_url(church), json={"name": "민수"}, headers=headers_for(MEMBER_ID))
    assert response.status_code == 403


def test_list_people_filters_by_type(client, fake, church):
    fake.seed(
        "students",
        {"church_id": church["id"], "name": "민수", "registered_at": "2026-10-01T00:00:00+00:00"},
        {"church_id": church["id"], "name": "지우", "registered_at": "2026-10-02T00:00:00+00:00"},
        {"church_id": church["id"], "name": "한선생", "type": "teacher", "registered_at": "2026-10-03T00:00:00+00:00"},
    )
    response = client.get(people_url(church), headers=headers_for(MEMBER_ID))
    assert [p["name"] for p in response.json()] == ["한선생", "지우", "민수"]

    response = client.get(people_url(church), params={"type": "student"}, headers=headers_for(MEMBER_ID))
    assert [p["name"] for p in response.json()] == ["지우", "민수"]


def test_update_person(client, fake, church):
    person = fake.seed("students", {"church_id": church["id"], "name": "민수"})[0]
    response = client.put(
        people_url(church, f"/{person['id']}"),
        json={"grade": "중1", "attendance_days": [0]},
        headers=headers_for(TEACHER_ID),
    )
    assert response.status_code == 200
    body = response.json()
    assert body["grade"] == "중1"
    assert body["attendance_days"] == [0]
    assert body["updated_at"] is not None


def test_update_person_null_fields(client, fake, church):
    person = fake.seed("students", {"church_id": church["id"], "name": "민수", "attendance_days": [0]})[0]
    url = people_url(church, f"/{person['id']}")

    for payload in ({"type": None}, {"name": None}):
        response = client.put(url, json=payload, headers=headers_for(TEACHER_ID))
        assert response.status_code == 400, payload
    stored = fake.rows("students", id=person["id"])[0]
    assert stored["type"] == "student"
    assert stored["name"] == "민수"

    response = client.put(url, json={"attendance_days": None}, headers=headers_for(TEACHER_ID))
    assert response.status_code == 200
    assert response.json()["attendance_days"] == []
    assert fake.rows("students", id=person["id"])[0]["attendance_days"] == []


def test_delete_person_cascades(client, fake, church):
    person = fake.seed("students", {
        "church_id": church["id"],
        "name": "민수",
        "photo_url": f"https://fake.supabase.co/storage/v1/object/public/student-photos/{church['id']}/p.jpg",
    })[0]
    fake.storage.objects[("student-photos", f"{church['id']}/p.jpg")] = (b"img", "image/jpeg")
    fake.seed("attendance", {"church_id": church["id"], "student_id": person["id"], "date": "2026-10-18"})
    offering = fake.seed("offerings", {
        "church_id": church["id"], "student_id": person["id"], "offering_type": "tithe",
        "amount": 1000, "offering_date": "2026-10-18",
    })[0]
    prayer = fake.seed("prayer_requests", {"church_id": church["id"], "student_id": person["id"], "title": "t", "content": "c"})[0]
    schedule = fake.seed("service_schedules", {
        "church_id": church["id"], "assigned_student_id": person["id"], "service_type": "worship",
        "service_name": "찬양 인도", "schedule_date": "2026-10-25",
    })[0]

    response = client.delete(people_url(church, f"/{person['id']}"), headers=headers_for(OWNER_ID))
    assert response.status_code == 204
    assert fake.rows("students", id=person["id"]) == []
    assert fake.rows("attendance", student_id=person["id"]) == []
    assert fake.rows("offerings", id=offering["id"])[0]["student_id"] is None
    assert fake.rows("prayer_requests", id=prayer["id"])[0]["student_id"] is None
    assert fake.rows("service_schedules", id=schedule["id"])[0]["assigned_student_id"] is None
    assert fake.storage.objects == {}


def test_upload_and_remove_photo(client, fake, church):
    person = fake.seed("students", {"church_id": church["id"], "name": "민수"})[0]
    response = client.post(
        people_url(church, f"/{person['id']}/photo"),
        files={"file": ("me.png", b"\x89PNG data", "image/png")},
        headers=headers_for(TEACHER_ID),
    )
    assert response.status_code == 200
    key = f"{church['id']}/{person['id']}.png"
    assert response.json()["photo_url"].endswith(f"/student-photos/{key}")
    assert ("student-photos", key) in fake.storage.objects

    response = client.delete(people_url(church, f"/{person['id']}/photo"), headers=headers_for(TEACHER_ID))
    assert response.status_code == 200
    assert response.json()["photo_url"] is None
    assert fake.storage.objects == {}


def test_photo_must_be_an_image(client, fake, church):
    person = fake.seed("students", {"church_id": church["id"], "name": "민수"})[0]
    response = client.post(
        people_url(church, f"/{person['id']}/photo"),
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=headers_for(TEACHER_ID),
    )
    assert response.status_code == 400


def test_unknown_person_is_404(client, church):
    response = client.get(people_url(church, "/missing"), headers=headers_for(MEMBER_ID))
    assert response.status_code == 404
