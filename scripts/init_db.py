from sqlalchemy.orm import Session
from database.db import Base, SessionLocal, engine

# ✅ 테이블 생성을 위해 모든 모델 import
from models import (  # noqa: F401
    classes, grades, periods, report_cards, school_settings,
    school_years, students, subjects,
)
from services.settings_service import initialize_defaults


def init_db():
    Base.metadata.create_all(bind=engine)
    print("✅ 테이블 생성 완료")

    db: Session = SessionLocal()
    try:
        result = initialize_defaults(db)
    finally:
        db.close()
    print(f"✅ 기본 설정 초기화 완료 (생성 {len(result['created'])}건, 기존 {len(result['existing'])}건)")


if __name__ == "__main__":
    init_db()
