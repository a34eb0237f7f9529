import csv

from models.grades import GradeEntry, GradeHistory
from scripts.import_grades import migrate_grades

FIELDS = ["student_id", "subject_id", "period_id", "value", "coefficient", "evaluation_type", "appreciation"]


def write_csv(path, rows):
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)


def test_malformed_rows_are_skipped(tmp_path, db, factory, school):
    student = factory.student(school["class"])
    base = {
        "student_id": student.id, "subject_id": school["math"].id, "period_id": school["period"].id,
        "value": "14", "coefficient": "2", "evaluation_type": "exam", "appreciation": "",
    }
    csv_path = tmp_path / "grades.csv"
    write_csv(csv_path, [
        dict(base, evaluation_type="test"),       # 알 수 없는 평가 유형
        dict(base, value="abc"),                  # 숫자가 아님
        dict(base, value="25"),                   # 범위 초과
        dict(base, student_id="999"),             # 없는 학생
        base,
        dict(base, value="9.5", coefficient=""),  # 기본 계수
    ])

    imported, skipped = migrate_grades(str(csv_path))

    assert (imported, skipped) == (2, 4)
    db.expire_all()
    entries = db.query(GradeEntry).order_by(GradeEntry.id).all()
    assert [(e.value, e.coefficient, e.evaluation_type) for e in entries] == [
        (14.0, 2, "exam"),
        (9.5, 1, "exam"),
    ]
    assert db.query(GradeHistory).count() == 2
