from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dependencies.db import get_db
from models.periods import Period as PeriodModel
from models.school_years import SchoolYear as SchoolYearModel
from schemas.school_years import SchoolYear as SchoolYearSchema, SchoolYearCreate
from services.errors import ConflictError, NotFoundError, ValidationError

router = APIRouter(prefix="/school-years", tags=["학년도"])


def _get_or_404(db: Session, year_id: int) -> SchoolYearModel:
    year = db.query(SchoolYearModel).filter(SchoolYearModel.id == year_id).first()
    if year is None:
        raise NotFoundError("학년도를 찾을 수 없습니다", school_year_id=year_id)
    return year


def _clear_current(db: Session, keep_id=None):
    # 현재 학년도는 하나만
    query = db.query(SchoolYearModel).filter(SchoolYearModel.is_current.is_(True))
    if keep_id is not None:
        query = query.filter(SchoolYearModel.id != keep_id)
    query.update({"is_current": False}, synchronize_session=False)


# ==========================================================
# [1단계] 정적 라우터
# ==========================================================

# ✅ [CURRENT] 현재 학년도
@router.get("/current")
def read_current_school_year(db: Session = Depends(get_db)):
    year = db.query(SchoolYearModel).filter(SchoolYearModel.is_current.is_(True)).first()
    if year is None:
        raise NotFoundError("현재 학년도가 설정되어 있지 않습니다")
    return {"success": True, "data": SchoolYearSchema.model_validate(year)}


# ==========================================================
# [2단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 학년도 추가
@router.post("/")
def create_school_year(payload: SchoolYearCreate, db: Session = Depends(get_db)):
    if db.query(SchoolYearModel.id).filter(SchoolYearModel.name == payload.name).first():
        raise ConflictError(f"이미 존재하는 학년도입니다: {payload.name}")

    if payload.is_current:
        _clear_current(db)
    year = SchoolYearModel(**payload.model_dump())
    db.add(year)
    db.commit()
    db.refresh(year)
    return {
        "success": True,
        "data": SchoolYearSchema.model_validate(year),
        "message": "학년도가 추가되었습니다",
    }


# ✅ [READ] 전체 학년도 조회
@router.get("/")
def read_school_years(db: Session = Depends(get_db)):
    years = db.query(SchoolYearModel).order_by(SchoolYearModel.start_date.desc()).all()
    return {"success": True, "data": [SchoolYearSchema.model_validate(y) for y in years]}


# ✅ [READ] 단일 학년도 조회
@router.get("/{year_id}")
def read_school_year(year_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": SchoolYearSchema.model_validate(_get_or_404(db, year_id))}


# ✅ [UPDATE] 학년도 수정
@router.put("/{year_id}")
def update_school_year(year_id: int, payload: SchoolYearCreate, db: Session = Depends(get_db)):
    year = _get_or_404(db, year_id)
    if payload.is_current:
        _clear_current(db, keep_id=year_id)
    for key, value in payload.model_dump().items():
        setattr(year, key, value)
    db.commit()
    db.refresh(year)
    return {
        "success": True,
        "data": SchoolYearSchema.model_validate(year),
        "message": "학년도가 수정되었습니다",
    }


# ✅ [DELETE] 학년도 삭제 (기간이 남아 있으면 불가)
@router.delete("/{year_id}")
def delete_school_year(year_id: int, db: Session = Depends(get_db)):
    year = _get_or_404(db, year_id)
    if db.query(PeriodModel.id).filter(PeriodModel.school_year_id == year_id).first():
        raise ConflictError("기간이 등록된 학년도는 삭제할 수 없습니다", school_year_id=year_id)
    if year.is_current:
        raise ValidationError("현재 학년도는 삭제할 수 없습니다", school_year_id=year_id)
    db.delete(year)
    db.commit()
    return {"success": True, "message": f"학년도 {year_id} 삭제 완료"}
