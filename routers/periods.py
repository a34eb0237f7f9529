from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dependencies.db import get_db
from schemas.periods import Period as PeriodSchema, PeriodCreate, PeriodUpdate
from services import period_service

router = APIRouter(prefix="/periods", tags=["평가 기간"])


# ==========================================================
# [1단계] 정적 라우터
# ==========================================================

# ✅ [ACTIVE] 현재 학년도의 입력 가능 기간
@router.get("/active")
def read_active_periods(db: Session = Depends(get_db)):
    periods = period_service.active_periods(db)
    return {"success": True, "data": [PeriodSchema.model_validate(p) for p in periods]}


# ==========================================================
# [2단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 기간 추가
@router.post("/")
def create_period(payload: PeriodCreate, db: Session = Depends(get_db)):
    period = period_service.create_period(db, payload)
    return {
        "success": True,
        "data": PeriodSchema.model_validate(period),
        "message": "기간이 추가되었습니다",
    }


# ✅ [READ] 기간 목록 (학년도 필터)
@router.get("/")
def read_periods(school_year_id: Optional[int] = None, db: Session = Depends(get_db)):
    periods = period_service.list_periods(db, school_year_id)
    return {"success": True, "data": [PeriodSchema.model_validate(p) for p in periods]}


# ✅ [READ] 단일 기간 조회
@router.get("/{period_id}")
def read_period(period_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": PeriodSchema.model_validate(period_service.get_period(db, period_id))}


# ✅ [UPDATE] 기간 수정 (확정 기간은 날짜 변경 불가)
@router.put("/{period_id}")
def update_period(period_id: int, payload: PeriodUpdate, db: Session = Depends(get_db)):
    period = period_service.update_period(db, period_id, payload)
    return {
        "success": True,
        "data": PeriodSchema.model_validate(period),
        "message": "기간이 수정되었습니다",
    }


# ✅ [DELETE] 기간 삭제 (성적/성적표가 있으면 불가)
@router.delete("/{period_id}")
def delete_period(period_id: int, db: Session = Depends(get_db)):
    period_service.delete_period(db, period_id)
    return {"success": True, "message": f"기간 {period_id} 삭제 완료"}


# ==========================================================
# [3단계] 기간 확정 (성적 잠금)
# ==========================================================

# ✅ [VALIDATE] 기간 확정 → 소속 성적 전체 잠금, 이후 성적 변경은 409
@router.put("/{period_id}/validate")
def validate_period(period_id: int, db: Session = Depends(get_db)):
    locked = period_service.validate_period(db, period_id)
    period = period_service.get_period(db, period_id)
    return {
        "success": True,
        "data": {"period": PeriodSchema.model_validate(period), "locked_grades": locked},
        "message": f"기간이 확정되었습니다 (성적 {locked}건 잠금)",
    }
