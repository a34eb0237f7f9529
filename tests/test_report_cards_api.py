from datetime import date

import pytest

from models.grades import GradeEntry
from models.report_cards import ReportCard


@pytest.fixture
def ranked_class(factory, school):
    """
    Diallo  : Math 15(x2), 12 → 14.0 / Français 16 → 15.0
    Ndiaye  : Math 18 / Français 18 → 18.0
    Sow     : Math 15 / Français 15 → 15.0
    """
    math, french, period = school["math"], school["french"], school["period"]
    diallo = factory.student(school["class"], first_name="Awa", last_name="Diallo")
    ndiaye = factory.student(school["class"], first_name="Fatou", last_name="Ndiaye")
    sow = factory.student(school["class"], first_name="Ibrahima", last_name="Sow")

    factory.grade(diallo, math, period, 15, coefficient=2)
    factory.grade(diallo, math, period, 12, coefficient=1)
    factory.grade(diallo, french, period, 16)
    factory.grade(ndiaye, math, period, 18)
    factory.grade(ndiaye, french, period, 18)
    factory.grade(sow, math, period, 15)
    factory.grade(sow, french, period, 15)

    return {"diallo": diallo.id, "ndiaye": ndiaye.id, "sow": sow.id, "period": period.id,
            "class": school["class"].id}


def test_generate_report_card(client, ranked_class):
    res = client.post(f"/v1/report-cards/generate/{ranked_class['diallo']}/{ranked_class['period']}")

    assert res.status_code == 200
    data = res.json()["data"]
    assert data["report_card"]["overall_average"] == 15.0
    assert data["report_card"]["class_rank"] == 2
    assert data["report_card"]["is_generated"] is True
    assert data["report_card"]["generated_at"] is not None

    details = data["details"]
    assert details["class_size"] == 3
    assert details["is_final"] is False
    assert details["mention"] == "very_good"
    assert [s["subject_name"] for s in details["subjects"]] == ["Français", "Mathématiques"]
    assert details["subjects"][1]["average"] == 14.0
    assert details["subjects"][1]["coefficient_total"] == 3
    assert details["class_statistics"]["highest"] == 18.0
    assert details["class_statistics"]["median"] == 15.0


def test_tied_students_share_rank(client, ranked_class):
    ranks = {}
    for key in ("diallo", "ndiaye", "sow"):
        res = client.post(f"/v1/report-cards/generate/{ranked_class[key]}/{ranked_class['period']}")
        ranks[key] = res.json()["data"]["report_card"]["class_rank"]
    assert ranks == {"ndiaye": 1, "diallo": 2, "sow": 2}


def test_regeneration_preserves_appreciation(client, db, ranked_class):
    url = f"/v1/report-cards/generate/{ranked_class['diallo']}/{ranked_class['period']}"

    first = client.post(url, json={"general_appreciation": "Bon trimestre"}).json()["data"]
    second = client.post(url).json()["data"]

    assert second["report_card"]["id"] == first["report_card"]["id"]
    assert second["report_card"]["overall_average"] == first["report_card"]["overall_average"]
    assert second["report_card"]["class_rank"] == first["report_card"]["class_rank"]
    assert second["report_card"]["general_appreciation"] == "Bon trimestre"
    assert second["details"]["appreciation"] == "Bon trimestre"

    third = client.post(url, json={"general_appreciation": "Peut mieux faire"}).json()["data"]
    assert third["report_card"]["general_appreciation"] == "Peut mieux faire"
    assert db.query(ReportCard).count() == 1


def test_regeneration_reflects_new_entries(client, factory, school, ranked_class):
    url = f"/v1/report-cards/generate/{ranked_class['sow']}/{ranked_class['period']}"
    client.post(url)

    client.post("/v1/grades/", json={
        "student_id": ranked_class["sow"], "subject_id": school["math"].id,
        "period_id": ranked_class["period"], "value": 20, "coefficient": 3,
    })
    card = client.post(url).json()["data"]["report_card"]
    # Math (15 + 20*3)/4 = 18.75, Français 15 → 16.88
    assert card["overall_average"] == 16.88
    assert card["class_rank"] == 2


def test_student_without_entries_is_insufficient(client, factory, school, ranked_class):
    newcomer = factory.student(school["class"], first_name="Khady", last_name="Ba")
    res = client.post(f"/v1/report-cards/generate/{newcomer.id}/{ranked_class['period']}")

    assert res.status_code == 422
    assert res.json()["error"]["code"] == "INSUFFICIENT_DATA"


def test_batch_generation_collects_failures(client, db, factory, school, ranked_class):
    without_entries = [
        factory.student(school["class"], first_name="Khady", last_name="Ba").id,
        factory.student(school["class"], first_name="Omar", last_name="Cissé").id,
    ]
    factory.student(school["class"], first_name="Absent", last_name="Zz", is_active=False)

    res = client.post(f"/v1/report-cards/generate-class/{ranked_class['class']}/{ranked_class['period']}")
    assert res.status_code == 200
    result = res.json()["data"]

    assert result["total_students"] == 5
    assert result["succeeded_count"] == 3
    assert result["failed_count"] == 2
    assert sorted(f["student_id"] for f in result["failed"]) == sorted(without_entries)
    assert all(f["code"] == "INSUFFICIENT_DATA" for f in result["failed"])
    assert {s["student_id"]: s["class_rank"] for s in result["succeeded"]} == {
        ranked_class["ndiaye"]: 1, ranked_class["diallo"]: 2, ranked_class["sow"]: 2,
    }
    assert db.query(ReportCard).count() == 3


def test_generation_blocked_when_period_not_open(client, factory, school, ranked_class):
    closed = factory.period(school["year"], name="2e trimestre", is_active=False,
                            start=date(2025, 1, 6), end=date(2025, 3, 31))
    res = client.post(f"/v1/report-cards/generate/{ranked_class['diallo']}/{closed.id}")

    assert res.status_code == 409
    assert res.json()["error"]["code"] == "PERIOD_NOT_OPEN"


def test_generation_after_validation_is_final(client, db, ranked_class):
    client.put(f"/v1/periods/{ranked_class['period']}/validate")
    db.expire_all()
    before = [(e.id, e.value, e.validated_at) for e in db.query(GradeEntry).order_by(GradeEntry.id).all()]

    res = client.post(f"/v1/report-cards/generate-class/{ranked_class['class']}/{ranked_class['period']}")
    assert res.json()["data"]["succeeded_count"] == 3

    details = client.get(f"/v1/report-cards/details/{ranked_class['diallo']}/{ranked_class['period']}")
    assert details.json()["data"]["details"]["is_final"] is True

    db.expire_all()
    after = [(e.id, e.value, e.validated_at) for e in db.query(GradeEntry).order_by(GradeEntry.id).all()]
    assert after == before


def test_details_do_not_persist(client, db, ranked_class):
    res = client.get(f"/v1/report-cards/details/{ranked_class['ndiaye']}/{ranked_class['period']}")

    assert res.status_code == 200
    assert res.json()["data"]["report_card"] is None
    assert res.json()["data"]["details"]["class_rank"] == 1
    assert db.query(ReportCard).count() == 0


def test_update_appreciation(client, ranked_class):
    card = client.post(
        f"/v1/report-cards/generate/{ranked_class['ndiaye']}/{ranked_class['period']}"
    ).json()["data"]["report_card"]

    res = client.put(f"/v1/report-cards/{card['id']}/appreciation",
                     json={"general_appreciation": "Excellent travail"})
    assert res.status_code == 200
    assert res.json()["data"]["general_appreciation"] == "Excellent travail"
    assert res.json()["data"]["class_rank"] == 1

    listed = client.get("/v1/report-cards/", params={"class_id": ranked_class["class"]}).json()["data"]
    assert [c["general_appreciation"] for c in listed] == ["Excellent travail"]


def test_html_rendering(client, ranked_class):
    url = f"/v1/report-cards/generate/{ranked_class['diallo']}/{ranked_class['period']}"
    client.post(url, json={"general_appreciation": "Élève sérieuse"})

    res = client.get(f"/v1/report-cards/html/{ranked_class['diallo']}/{ranked_class['period']}")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/html")

    html = res.text
    assert "Diallo Awa" in html
    assert "15.00 / 20.00" in html
    assert "2 / 3" in html
    assert "Élève sérieuse" in html
    assert "Document provisoire" in html


def test_unknown_report_card(client):
    res = client.get("/v1/report-cards/77")
    assert res.status_code == 404


def test_inactive_student_is_not_eligible(client, factory, school, ranked_class):
    former = factory.student(school["class"], first_name="Ousmane", last_name="Fall", is_active=False)
    factory.grade(former, school["math"], school["period"], 14)

    res = client.post(f"/v1/report-cards/generate/{former.id}/{ranked_class['period']}")
    assert res.status_code == 422
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert "재학" in res.json()["error"]["message"]
