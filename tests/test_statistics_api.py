def test_class_statistics_report(client, factory, school):
    math, french, period = school["math"], school["french"], school["period"]
    scores = {("Awa", "Diallo"): (15, 15), ("Fatou", "Ndiaye"): (18, 18), ("Ibrahima", "Sow"): (8, 10)}
    for (first, last), (m, f) in scores.items():
        student = factory.student(school["class"], first_name=first, last_name=last)
        factory.grade(student, math, period, m)
        factory.grade(student, french, period, f)
    factory.student(school["class"], first_name="Khady", last_name="Ba")

    res = client.get(f"/v1/statistics/class/{school['class'].id}/period/{period.id}")
    assert res.status_code == 200
    data = res.json()["data"]

    stats = data["statistics"]
    assert stats["student_count"] == 3
    assert stats["mean"] == 14.0
    assert stats["median"] == 15.0
    assert stats["lowest"] == 9.0
    assert stats["pass_count"] == 2
    assert stats["distribution"]["excellent"] == 1
    assert stats["distribution"]["insufficient"] == 1

    assert [(r["last_name"], r["rank"], r["mention"]) for r in data["ranking"]] == [
        ("Ndiaye", 1, "excellent"),
        ("Diallo", 2, "very_good"),
        ("Sow", 3, "insufficient"),
    ]


def test_class_statistics_without_grades(client, factory, school):
    factory.student(school["class"])
    res = client.get(f"/v1/statistics/class/{school['class'].id}/period/{school['period'].id}")

    assert res.status_code == 200
    assert res.json()["data"]["statistics"] is None
    assert res.json()["data"]["ranking"] == []


def test_subject_statistics(client, factory, school):
    math, period = school["math"], school["period"]
    awa = factory.student(school["class"])
    moussa = factory.student(school["class"], first_name="Moussa", last_name="Traoré")
    factory.grade(awa, math, period, 12, coefficient=2)
    factory.grade(awa, math, period, 17)
    factory.grade(moussa, math, period, 7)
    factory.grade(moussa, school["french"], period, 14)

    res = client.get(f"/v1/statistics/subjects/{school['class'].id}/period/{period.id}")
    stats = {s["subject_name"]: s for s in res.json()["data"]}

    assert stats["Mathématiques"]["entry_count"] == 3
    assert stats["Mathématiques"]["mean"] == 12.0
    assert stats["Mathématiques"]["highest"] == 17.0
    assert stats["Mathématiques"]["lowest"] == 7.0
    assert stats["Français"]["entry_count"] == 1

    res = client.get(
        f"/v1/statistics/subjects/{school['class'].id}/period/{period.id}",
        params={"subject_id": school["french"].id},
    )
    assert [s["subject_name"] for s in res.json()["data"]] == ["Français"]


def test_unknown_class(client, school):
    res = client.get(f"/v1/statistics/class/999/period/{school['period'].id}")
    assert res.status_code == 404
