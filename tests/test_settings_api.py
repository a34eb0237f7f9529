def test_grading_defaults(client):
    res = client.get("/v1/settings/grading")
    data = res.json()["data"]

    assert data["grade_min"] == 0.0
    assert data["grade_max"] == 20.0
    assert data["pass_mark"] == 10.0
    assert data["subject_weighting"] == "subject_weight"
    assert data["grade_bands"]["excellent"] == 16.0


def test_initialize_is_idempotent(client):
    first = client.post("/v1/settings/initialize").json()["data"]
    assert "grade_max" in first["created"]
    assert first["existing"] == []

    second = client.post("/v1/settings/initialize").json()["data"]
    assert second["created"] == []
    assert sorted(second["existing"]) == sorted(first["created"])

    listed = client.get("/v1/settings/").json()["data"]
    assert {s["key"] for s in listed} == set(first["created"])


def test_upsert_and_read_setting(client):
    res = client.put("/v1/settings/grade_max", json={"value": "10", "type": "number"})
    assert res.status_code == 200
    assert res.json()["data"]["converted_value"] == 10.0

    assert client.get("/v1/settings/grade_max").json()["data"]["value"] == "10"
    assert client.get("/v1/settings/grading").json()["data"]["grade_max"] == 10.0


def test_grade_range_follows_settings(client, factory, school):
    student = factory.student(school["class"])
    client.put("/v1/settings/grade_max", json={"value": "10", "type": "number"})

    res = client.post("/v1/grades/", json={
        "student_id": student.id, "subject_id": school["math"].id,
        "period_id": school["period"].id, "value": 15,
    })
    assert res.status_code == 422


def test_invalid_grading_settings_are_rejected(client):
    res = client.put("/v1/settings/grade_min", json={"value": "25", "type": "number"})
    assert res.status_code == 422

    res = client.put("/v1/settings/pass_mark", json={"value": "abc", "type": "number"})
    assert res.status_code == 422

    res = client.put("/v1/settings/subject_weighting", json={"value": "flat", "type": "string"})
    assert res.status_code == 422

    assert client.get("/v1/settings/").json()["data"] == []


def test_free_settings_keep_their_type(client):
    res = client.put("/v1/settings/show_rank", json={"value": "true", "type": "boolean", "description": "석차 표시"})
    assert res.json()["data"]["converted_value"] is True
    assert res.json()["data"]["description"] == "석차 표시"


def test_delete_setting_restores_default(client):
    client.put("/v1/settings/pass_mark", json={"value": "12", "type": "number"})
    assert client.delete("/v1/settings/pass_mark").status_code == 200
    assert client.get("/v1/settings/grading").json()["data"]["pass_mark"] == 10.0

    res = client.delete("/v1/settings/pass_mark")
    assert res.status_code == 404


def test_precision_setting_changes_rounding(client, factory, school):
    student = factory.student(school["class"])
    factory.grade(student, school["math"], school["period"], 13)
    factory.grade(student, school["math"], school["period"], 14)
    factory.grade(student, school["math"], school["period"], 14)
    client.put("/v1/settings/average_precision", json={"value": "1", "type": "number"})

    res = client.get(f"/v1/grades/averages/student/{student.id}/period/{school['period'].id}")
    # 41 / 3 = 13.666...
    assert res.json()["data"]["average"] == 13.7
