import csv

import pydantic
from sqlalchemy.orm import Session
from database.db import SessionLocal
from schemas.grades import GradeEntryCreate
from services.errors import SchoolError
from services.grade_service import create_grade

# ✅ 파일 경로 (student_id, subject_id, period_id, value, coefficient, evaluation_type, appreciation)
CSV_PATH = "data/grades.csv"


def _row_to_payload(row) -> GradeEntryCreate:
    return GradeEntryCreate(
        student_id=int(row["student_id"]),              # 학생 ID
        subject_id=int(row["subject_id"]),              # 과목 ID
        period_id=int(row["period_id"]),                # 평가 기간 ID
        value=float(row["value"]),                      # 점수
        coefficient=int(row["coefficient"]) if row.get("coefficient") else None,
        evaluation_type=row.get("evaluation_type") or "normal",
        appreciation=row.get("appreciation") or None
    )


def migrate_grades(csv_path: str = CSV_PATH):
    """API와 같은 쓰기 경계(기간 잠금, 점수 범위, 이력)를 거쳐 입력. 잘못된 행은 건너뛰고 보고"""
    db: Session = SessionLocal()
    imported, skipped = 0, 0

    try:
        with open(csv_path, newline="", encoding="utf-8-sig") as csvfile:
            reader = csv.DictReader(csvfile)
            for line_no, row in enumerate(reader, start=2):
                try:
                    create_grade(db, _row_to_payload(row))
                    imported += 1
                except SchoolError as exc:
                    db.rollback()
                    skipped += 1
                    print(f"⚠️ {line_no}행 건너뜀 ({exc.code}): {exc.message}")
                except (pydantic.ValidationError, ValueError, KeyError, TypeError) as exc:
                    db.rollback()
                    skipped += 1
                    print(f"⚠️ {line_no}행 건너뜀 (형식 오류): {exc}")
    finally:
        db.close()

    print(f"✅ 성적 CSV → DB 마이그레이션 완료 (입력 {imported}건, 건너뜀 {skipped}건)")
    return imported, skipped


if __name__ == "__main__":
    migrate_grades()
