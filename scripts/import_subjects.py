import csv
from sqlalchemy.orm import Session
from database.db import SessionLocal
from models.subjects import Subject as SubjectModel  # ✅ 모델 import

CSV_PATH = "data/subjects.csv"  # ✅ 파일 경로 (name, code, weight)

def migrate_subjects():
    db: Session = SessionLocal()

    with open(CSV_PATH, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        for row in reader:
            subject = SubjectModel(
                name=row["name"],                           # 과목 이름 (예: Mathématiques)
                code=row["code"],                           # 과목 코드 (예: MATH)
                weight=float(row.get("weight") or 1.0)      # 종합 평균 가중치
            )
            db.add(subject)

    db.commit()
    db.close()
    print("✅ 과목 CSV → DB 마이그레이션 완료")

if __name__ == "__main__":
    migrate_subjects()
