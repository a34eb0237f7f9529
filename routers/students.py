from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dependencies.db import get_db
from dependencies.pagination import get_pagination
from models.classes import SchoolClass as SchoolClassModel
from models.grades import GradeEntry as GradeEntryModel
from models.students import Student as StudentModel
from schemas.common import Pagination, paginate
from schemas.students import Student as StudentSchema, StudentCreate, StudentUpdate
from services.errors import ConflictError, NotFoundError, ValidationError

router = APIRouter(prefix="/students", tags=["학생 정보"])


def _get_or_404(db: Session, student_id: int) -> StudentModel:
    student = db.query(StudentModel).filter(StudentModel.id == student_id).first()
    if student is None:
        raise NotFoundError("학생을 찾을 수 없습니다", student_id=student_id)
    return student


def _check_class(db: Session, class_id: Optional[int]):
    if class_id is None:
        return
    if db.query(SchoolClassModel.id).filter(SchoolClassModel.id == class_id).first() is None:
        raise NotFoundError("학급을 찾을 수 없습니다", class_id=class_id)


# ==========================================================
# [1단계] CRUD 기본 라우터
# ==========================================================

# ✅ [CREATE] 학생 정보 추가
@router.post("/")
def create_student(payload: StudentCreate, db: Session = Depends(get_db)):
    exists = (
        db.query(StudentModel.id)
        .filter(StudentModel.registration_number == payload.registration_number)
        .first()
    )
    if exists:
        raise ConflictError(f"이미 등록된 학번입니다: {payload.registration_number}")
    _check_class(db, payload.class_id)

    student = StudentModel(**payload.model_dump())
    db.add(student)
    db.commit()
    db.refresh(student)
    return {
        "success": True,
        "data": StudentSchema.model_validate(student),
        "message": "학생 정보가 성공적으로 추가되었습니다",
    }


# ✅ [READ] 학생 목록 (반/재학 여부 필터 + 페이지네이션)
@router.get("/")
def read_students(
    class_id: Optional[int] = None,
    is_active: Optional[bool] = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    query = db.query(StudentModel)
    if class_id is not None:
        query = query.filter(StudentModel.class_id == class_id)
    if is_active is not None:
        query = query.filter(StudentModel.is_active.is_(is_active))
    query = query.order_by(StudentModel.last_name.asc(), StudentModel.first_name.asc(), StudentModel.id.asc())

    items, meta = paginate(query, pagination)
    return {"success": True, "data": [StudentSchema.model_validate(s) for s in items], "meta": meta}


# ✅ [READ] 단일 학생 조회
@router.get("/{student_id}")
def read_student(student_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": StudentSchema.model_validate(_get_or_404(db, student_id))}


# ✅ [UPDATE] 학생 정보 수정 (보낸 필드만)
@router.put("/{student_id}")
def update_student(student_id: int, payload: StudentUpdate, db: Session = Depends(get_db)):
    student = _get_or_404(db, student_id)
    changes = payload.model_dump(exclude_unset=True)
    for required in ("first_name", "last_name", "is_active"):
        if required in changes and changes[required] is None:
            raise ValidationError(f"{required} 값은 비울 수 없습니다", student_id=student_id)
    if "class_id" in changes:
        _check_class(db, changes["class_id"])
    for key, value in changes.items():
        setattr(student, key, value)
    db.commit()
    db.refresh(student)
    return {
        "success": True,
        "data": StudentSchema.model_validate(student),
        "message": "학생 정보가 수정되었습니다",
    }


# ✅ [DELETE] 학생 삭제 (성적이 있으면 불가 → is_active=false 로 전환)
@router.delete("/{student_id}")
def delete_student(student_id: int, db: Session = Depends(get_db)):
    student = _get_or_404(db, student_id)
    if db.query(GradeEntryModel.id).filter(GradeEntryModel.student_id == student_id).first():
        raise ConflictError("성적이 있는 학생은 삭제할 수 없습니다. 재학 여부를 변경하세요", student_id=student_id)
    db.delete(student)
    db.commit()
    return {"success": True, "message": f"학생 {student_id} 삭제 완료"}
