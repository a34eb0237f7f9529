from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dependencies.db import get_db
from services import statistics_service

router = APIRouter(prefix="/statistics", tags=["성적 통계"])


# ✅ [CLASS] 반/기간 통계 + 석차표
# - 성적이 있는 학생만 집계, 없으면 statistics=None
@router.get("/class/{class_id}/period/{period_id}")
def read_class_statistics(class_id: int, period_id: int, db: Session = Depends(get_db)):
    report = statistics_service.class_statistics_report(db, class_id, period_id)
    message = None if report.statistics else "집계할 성적이 없습니다"
    return {"success": True, "data": report, "message": message}


# ✅ [SUBJECTS] 반/기간 과목별 통계 (개별 점수 기준)
@router.get("/subjects/{class_id}/period/{period_id}")
def read_subject_statistics(
    class_id: int,
    period_id: int,
    subject_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    stats = statistics_service.subject_statistics(db, class_id, period_id, subject_id)
    return {"success": True, "data": stats}
