import csv
from sqlalchemy.orm import Session
from database.db import SessionLocal
from models.students import Student as StudentModel  # ✅ 모델 import

CSV_PATH = "data/students.csv"  # ✅ 파일 경로 (first_name, last_name, registration_number, class_id)

def migrate_students():
    db: Session = SessionLocal()

    with open(CSV_PATH, newline="", encoding="utf-8-sig") as csvfile:
        reader = csv.DictReader(csvfile)
        for row in reader:
            student = StudentModel(
                first_name=row["first_name"],                        # 이름
                last_name=row["last_name"],                          # 성
                registration_number=row["registration_number"],      # 학번 (matricule)
                class_id=int(row["class_id"]) if row.get("class_id") else None,  # 소속 반 ID
                is_active=row.get("is_active", "true").lower() != "false"
            )
            db.add(student)

    db.commit()
    db.close()
    print("✅ 학생 정보 CSV → DB 마이그레이션 완료")

if __name__ == "__main__":
    migrate_students()
