from datetime import date

import pytest

from models.grades import GradeEntry


def test_create_period_and_reject_overlap(client, factory):
    year = factory.school_year()
    payload = {
        "name": "1er trimestre", "kind": "term",
        "start_date": "2024-09-01", "end_date": "2024-12-20",
        "school_year_id": year.id, "is_active": True,
    }
    res = client.post("/v1/periods/", json=payload)
    assert res.status_code == 200
    assert res.json()["data"]["is_validated"] is False

    overlapping = dict(payload, name="Semestre 1", kind="semester", end_date="2025-01-31")
    res = client.post("/v1/periods/", json=overlapping)
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "CONFLICT"


def test_create_period_with_inverted_dates(client, factory):
    year = factory.school_year()
    res = client.post("/v1/periods/", json={
        "name": "P", "kind": "term", "start_date": "2024-12-20", "end_date": "2024-09-01",
        "school_year_id": year.id,
    })
    assert res.status_code == 422


def test_validate_period_locks_entries(client, db, factory, school):
    student = factory.student(school["class"])
    factory.grade(student, school["math"], school["period"], 12.0)
    factory.grade(student, school["french"], school["period"], 14.0)
    period_id = school["period"].id

    res = client.put(f"/v1/periods/{period_id}/validate")
    assert res.status_code == 200
    data = res.json()["data"]
    assert data["locked_grades"] == 2
    assert data["period"]["is_validated"] is True
    assert data["period"]["validated_at"] is not None

    db.expire_all()
    assert all(e.is_validated for e in db.query(GradeEntry).all())

    res = client.put(f"/v1/periods/{period_id}/validate")
    assert res.status_code == 409

    res = client.post("/v1/grades/", json={
        "student_id": student.id, "subject_id": school["math"].id, "period_id": period_id, "value": 10,
    })
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "PERIOD_LOCKED"


def test_validated_period_dates_are_frozen(client, factory, school):
    period_id = school["period"].id
    client.put(f"/v1/periods/{period_id}/validate")

    res = client.put(f"/v1/periods/{period_id}", json={"end_date": "2024-12-22"})
    assert res.status_code == 409

    res = client.put(f"/v1/periods/{period_id}", json={"name": "Trimestre 1"})
    assert res.status_code == 200
    assert res.json()["data"]["name"] == "Trimestre 1"


def test_active_periods_only_for_current_year(client, factory, school):
    old_year = factory.school_year(name="2023-2024", is_current=False)
    factory.period(old_year, name="Ancien", start=date(2023, 9, 1), end=date(2023, 12, 20))
    factory.period(school["year"], name="2e trimestre", is_active=False,
                   start=date(2025, 1, 6), end=date(2025, 3, 31))

    res = client.get("/v1/periods/active")
    assert [p["name"] for p in res.json()["data"]] == ["1er trimestre"]


def test_delete_period_with_grades_is_refused(client, factory, school):
    student = factory.student(school["class"])
    factory.grade(student, school["math"], school["period"], 12.0)

    res = client.delete(f"/v1/periods/{school['period'].id}")
    assert res.status_code == 409


def test_unknown_period(client):
    res = client.get("/v1/periods/42")
    assert res.status_code == 404
    assert res.json()["success"] is False
    assert "generated_at" in res.json()


@pytest.mark.parametrize("field", ["name", "kind", "start_date", "end_date", "is_active"])
def test_update_period_rejects_null_fields(client, db, school, field):
    period_id = school["period"].id
    res = client.put(f"/v1/periods/{period_id}", json={field: None})

    assert res.status_code == 422
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"

    data = client.get(f"/v1/periods/{period_id}").json()["data"]
    assert data["name"] == "1er trimestre"
    assert data["start_date"] == "2024-09-01"
