from database.db import SessionLocal


# ==========================================================
# [공통] DB 세션 관리
# - 요청마다 세션을 열고, 처리되지 않은 예외가 나면 롤백 후 종료
# ==========================================================
def get_db():
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
