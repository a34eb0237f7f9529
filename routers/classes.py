from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dependencies.db import get_db
from models.classes import SchoolClass as SchoolClassModel
from models.school_years import SchoolYear as SchoolYearModel
from models.students import Student as StudentModel
from schemas.classes import ClassCreate, SchoolClass as SchoolClassSchema
from schemas.students import Student as StudentSchema
from services.errors import ConflictError, NotFoundError

router = APIRouter(prefix="/classes", tags=["학급 정보"])


def _get_or_404(db: Session, class_id: int) -> SchoolClassModel:
    school_class = db.query(SchoolClassModel).filter(SchoolClassModel.id == class_id).first()
    if school_class is None:
        raise NotFoundError("학급을 찾을 수 없습니다", class_id=class_id)
    return school_class


def _check_school_year(db: Session, school_year_id: Optional[int]):
    if school_year_id is None:
        return
    if db.query(SchoolYearModel.id).filter(SchoolYearModel.id == school_year_id).first() is None:
        raise NotFoundError("학년도를 찾을 수 없습니다", school_year_id=school_year_id)


# ==========================================================
# [1단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 학급 추가
@router.post("/")
def create_class(payload: ClassCreate, db: Session = Depends(get_db)):
    _check_school_year(db, payload.school_year_id)
    school_class = SchoolClassModel(**payload.model_dump())
    db.add(school_class)
    db.commit()
    db.refresh(school_class)
    return {
        "success": True,
        "data": SchoolClassSchema.model_validate(school_class),
        "message": "학급 정보가 성공적으로 추가되었습니다",
    }


# ✅ [READ] 전체 학급 조회 (학년도 필터)
@router.get("/")
def read_classes(school_year_id: Optional[int] = None, db: Session = Depends(get_db)):
    query = db.query(SchoolClassModel)
    if school_year_id is not None:
        query = query.filter(SchoolClassModel.school_year_id == school_year_id)
    records = query.order_by(SchoolClassModel.name.asc()).all()
    return {"success": True, "data": [SchoolClassSchema.model_validate(r) for r in records]}


# ✅ [READ] 단일 학급 조회
@router.get("/{class_id}")
def read_class(class_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": SchoolClassSchema.model_validate(_get_or_404(db, class_id))}


# ✅ [UPDATE] 학급 수정
@router.put("/{class_id}")
def update_class(class_id: int, payload: ClassCreate, db: Session = Depends(get_db)):
    school_class = _get_or_404(db, class_id)
    _check_school_year(db, payload.school_year_id)
    for key, value in payload.model_dump().items():
        setattr(school_class, key, value)
    db.commit()
    db.refresh(school_class)
    return {
        "success": True,
        "data": SchoolClassSchema.model_validate(school_class),
        "message": "학급 정보가 수정되었습니다",
    }


# ✅ [DELETE] 학급 삭제 (소속 학생이 있으면 불가)
@router.delete("/{class_id}")
def delete_class(class_id: int, db: Session = Depends(get_db)):
    school_class = _get_or_404(db, class_id)
    if db.query(StudentModel.id).filter(StudentModel.class_id == class_id).first():
        raise ConflictError("학생이 배정된 학급은 삭제할 수 없습니다", class_id=class_id)
    db.delete(school_class)
    db.commit()
    return {"success": True, "message": f"학급 {class_id} 삭제 완료"}


# ==========================================================
# [2단계] 학급 소속 학생
# ==========================================================

# ✅ [STUDENTS] 학급 학생 목록 (성, 이름 순)
@router.get("/{class_id}/students")
def read_class_students(class_id: int, active_only: bool = True, db: Session = Depends(get_db)):
    _get_or_404(db, class_id)
    query = db.query(StudentModel).filter(StudentModel.class_id == class_id)
    if active_only:
        query = query.filter(StudentModel.is_active.is_(True))
    students = query.order_by(StudentModel.last_name.asc(), StudentModel.first_name.asc()).all()
    return {"success": True, "data": [StudentSchema.model_validate(s) for s in students]}
