from datetime import date

from churchecker.core import timeutils
from tests.conftest import ADMIN_ID, MEMBER_ID, TEACHER_ID, headers_for


def church_url(church, path):
    return f"/api/v1/churches/{church['id']}/{path}"


# events


def test_event_end_before_start_is_rejected(client, church):
    response = client.post(
        church_url(church, "events"),
        json={"title": "수련회", "start_datetime": "2026-11-02T10:00:00+09:00", "end_datetime": "2026-11-01T10:00:00+09:00"},
        headers=headers_for(ADMIN_ID),
    )
    assert response.status_code == 422


def test_event_update_keeps_end_after_start(client, church):
    response = client.post(
        church_url(church, "events"),
        json={"title": "수련회", "event_type": "retreat",
              "start_datetime": "2026-11-01T10:00:00+09:00", "end_datetime": "2026-11-02T15:00:00+09:00"},
        headers=headers_for(ADMIN_ID),
    )
    assert response.status_code == 201
    event_id = response.json()["id"]

    response = client.put(
        church_url(church, f"events/{event_id}"),
        json={"start_datetime": "2026-11-03T10:00:00+09:00"},
        headers=headers_for(ADMIN_ID),
    )
    assert response.status_code == 400

    response = client.put(
        church_url(church, f"events/{event_id}"),
        json={"location": "기도원"},
        headers=headers_for(ADMIN_ID),
    )
    assert response.status_code == 200
    assert response.json()["location"] == "기도원"


def test_events_listed_in_start_order(client, fake, church):
    fake.seed(
        "church_events",
        {"church_id": church["id"], "title": "later", "event_type": "meeting", "start_datetime": "2026-12-01T10:00:00+00:00"},
        {"church_id": church["id"], "title": "sooner", "event_type": "service", "start_datetime": "2026-11-01T10:00:00+00:00"},
    )
    response = client.get(church_url(church, "events"), headers=headers_for(MEMBER_ID))
    assert [e["title"] for e in response.json()] == ["sooner", "later"]

    response = client.get(church_url(church, "events"), params={"event_type": "meeting"}, headers=headers_for(MEMBER_ID))
    assert [e["title"] for e in response.json()] == ["later"]


def test_teacher_cannot_manage_events(client, church):
    response = client.post(
        church_url(church, "events"),
        json={"title": "모임", "start_datetime": "2026-11-01T10:00:00+09:00"},
        headers=headers_for(TEACHER_ID),
    )
    assert response.status_code == 403


# schedules


def test_schedule_assignment_and_status(client, fake, church):
    person = fake.seed("students", {"church_id": church["id"], "name": "지우"})[0]
    response = client.post(
        church_url(church, "schedules"),
        json={"service_type": "worship", "service_name": "찬양 인도", "schedule_date": "2026-10-25",
              "assigned_student_id": person["id"]},
        headers=headers_for(ADMIN_ID),
    )
    assert response.status_code == 201
    schedule = response.json()
    assert schedule["assigned_student_name"] == "지우"
    assert schedule["status"] == "scheduled"

    response = client.put(
        church_url(church, f"schedules/{schedule['id']}/status"),
        json={"status": "completed"},
        headers=headers_for(ADMIN_ID),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "completed"


def test_schedule_person_from_other_church_is_404(client, fake, church):
    other = fake.seed("churches", {"name": "다른교회", "owner_id": "someone"})[0]
    stranger = fake.seed("students", {"church_id": other["id"], "name": "외부인"})[0]
    response = client.post(
        church_url(church, "schedules"),
        json={"service_name": "반주", "schedule_date": "2026-10-25", "assigned_student_id": stranger["id"]},
        headers=headers_for(ADMIN_ID),
    )
    assert response.status_code == 404


def test_schedule_month_filter_and_summary(client, fake, church, monkeypatch):
    monkeypatch.setattr(timeutils, "today_local", lambda: date(2026, 10, 19))
    fake.seed(
        "service_schedules",
        {"church_id": church["id"], "service_type": "worship", "service_name": "a", "schedule_date": "2026-10-04",
         "status": "completed"},
        {"church_id": church["id"], "service_type": "prayer", "service_name": "b", "schedule_date": "2026-10-25"},
        {"church_id": church["id"], "service_type": "word", "service_name": "c", "schedule_date": "2026-10-11",
         "status": "cancelled"},
        {"church_id": church["id"], "service_type": "media", "service_name": "d", "schedule_date": "2026-11-01"},
    )
    response = client.get(
        church_url(church, "schedules"),
        params={"year": 2026, "month": 10},
        headers=headers_for(MEMBER_ID),
    )
    assert [s["service_name"] for s in response.json()] == ["a", "c", "b"]

    # a lone year or month is completed from today
    response = client.get(church_url(church, "schedules"), params={"month": 11}, headers=headers_for(MEMBER_ID))
    assert [s["service_name"] for s in response.json()] == ["d"]
    response = client.get(church_url(church, "schedules"), params={"year": 2026}, headers=headers_for(MEMBER_ID))
    assert [s["service_name"] for s in response.json()] == ["a", "c", "b"]
    response = client.get(church_url(church, "schedules"), headers=headers_for(MEMBER_ID))
    assert len(response.json()) == 4

    response = client.get(church_url(church, "schedules/summary"), headers=headers_for(MEMBER_ID))
    assert response.json() == {
        "year": 2026, "month": 10, "scheduled": 1, "completed": 1, "cancelled": 1, "total": 3,
    }
