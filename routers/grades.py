from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dependencies.db import get_db
from dependencies.pagination import get_pagination
from schemas.common import Pagination
from schemas.grades import GradeEntry as GradeEntrySchema, GradeEntryCreate, GradeEntryUpdate, GradeHistory
from services import grade_service
from services.class_results import student_period_summary
from services.period_service import get_period
from services.settings_service import get_grading_config

router = APIRouter(prefix="/grades", tags=["성적"])


# ==========================================================
# [1단계] 정적 조회 라우터
# ==========================================================

# ✅ [CLASS] 반/기간 성적 전체 (재학생만)
@router.get("/class/{class_id}/period/{period_id}")
def read_class_period_grades(class_id: int, period_id: int, db: Session = Depends(get_db)):
    get_period(db, period_id)
    entries = grade_service.class_period_entries(db, class_id, period_id)
    return {
        "success": True,
        "data": [GradeEntrySchema.model_validate(e) for e in entries],
        "count": len(entries),
    }


# ✅ [AVERAGES] 학생/기간 과목별 평균 + 종합 평균
# - 성적이 없으면 average=None (0점 처리하지 않음)
@router.get("/averages/student/{student_id}/period/{period_id}")
def read_student_averages(student_id: int, period_id: int, db: Session = Depends(get_db)):
    get_period(db, period_id)
    summary = student_period_summary(db, student_id, period_id, get_grading_config(db))
    message = None if summary["average"] is not None else "평균을 계산할 성적이 없습니다"
    return {"success": True, "data": summary, "message": message}


# ==========================================================
# [2단계] CRUD 기본 라우터 (기간 잠금 검사는 서비스 계층)
# ==========================================================

# ✅ [CREATE] 성적 입력
@router.post("/")
def create_grade(payload: GradeEntryCreate, db: Session = Depends(get_db)):
    entry = grade_service.create_grade(db, payload)
    return {
        "success": True,
        "data": GradeEntrySchema.model_validate(entry),
        "message": "성적이 입력되었습니다",
    }


# ✅ [READ] 성적 목록 (필터 + 페이지네이션)
@router.get("/")
def read_grades(
    student_id: Optional[int] = None,
    subject_id: Optional[int] = None,
    period_id: Optional[int] = None,
    class_id: Optional[int] = None,
    is_validated: Optional[bool] = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    items, meta = grade_service.list_grades(
        db, pagination,
        student_id=student_id, subject_id=subject_id, period_id=period_id,
        class_id=class_id, is_validated=is_validated,
    )
    return {"success": True, "data": [GradeEntrySchema.model_validate(e) for e in items], "meta": meta}


# ✅ [READ] 단일 성적 조회
@router.get("/{grade_id}")
def read_grade(grade_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": GradeEntrySchema.model_validate(grade_service.get_grade(db, grade_id))}


# ✅ [UPDATE] 성적 수정 (점수/계수/평가 유형/의견)
@router.put("/{grade_id}")
def update_grade(grade_id: int, payload: GradeEntryUpdate, db: Session = Depends(get_db)):
    entry = grade_service.update_grade(db, grade_id, payload)
    return {
        "success": True,
        "data": GradeEntrySchema.model_validate(entry),
        "message": "성적이 수정되었습니다",
    }


# ✅ [DELETE] 성적 삭제
@router.delete("/{grade_id}")
def delete_grade(grade_id: int, db: Session = Depends(get_db)):
    grade_service.delete_grade(db, grade_id)
    return {"success": True, "message": f"성적 {grade_id} 삭제 완료"}


# ✅ [HISTORY] 성적 변경 이력 (최신순)
@router.get("/{grade_id}/history")
def read_grade_history(grade_id: int, db: Session = Depends(get_db)):
    grade_service.get_grade(db, grade_id)
    history = grade_service.grade_history(db, grade_id)
    return {"success": True, "data": [GradeHistory.model_validate(h) for h in history]}
