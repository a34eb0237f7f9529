from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dependencies.db import get_db
from models.grades import GradeEntry as GradeEntryModel
from models.subjects import Subject as SubjectModel
from schemas.subjects import Subject as SubjectSchema, SubjectCreate
from services.errors import ConflictError, NotFoundError

router = APIRouter(prefix="/subjects", tags=["과목 정보"])


def _get_or_404(db: Session, subject_id: int) -> SubjectModel:
    subject = db.query(SubjectModel).filter(SubjectModel.id == subject_id).first()
    if subject is None:
        raise NotFoundError("과목을 찾을 수 없습니다", subject_id=subject_id)
    return subject


def _check_code(db: Session, code: str, exclude_id=None):
    query = db.query(SubjectModel.id).filter(SubjectModel.code == code)
    if exclude_id is not None:
        query = query.filter(SubjectModel.id != exclude_id)
    if query.first():
        raise ConflictError(f"이미 사용 중인 과목 코드입니다: {code}")


# ✅ [CREATE] 과목 정보 추가
@router.post("/")
def create_subject(payload: SubjectCreate, db: Session = Depends(get_db)):
    _check_code(db, payload.code)
    subject = SubjectModel(**payload.model_dump())
    db.add(subject)
    db.commit()
    db.refresh(subject)
    return {
        "success": True,
        "data": SubjectSchema.model_validate(subject),
        "message": "과목 정보가 성공적으로 추가되었습니다",
    }


# ✅ [READ] 전체 과목 조회
@router.get("/")
def read_subjects(db: Session = Depends(get_db)):
    records = db.query(SubjectModel).order_by(SubjectModel.name.asc()).all()
    return {"success": True, "data": [SubjectSchema.model_validate(r) for r in records]}


# ✅ [READ] 단일 과목 조회
@router.get("/{subject_id}")
def read_subject(subject_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": SubjectSchema.model_validate(_get_or_404(db, subject_id))}


# ✅ [UPDATE] 과목 정보 수정
@router.put("/{subject_id}")
def update_subject(subject_id: int, payload: SubjectCreate, db: Session = Depends(get_db)):
    subject = _get_or_404(db, subject_id)
    _check_code(db, payload.code, exclude_id=subject_id)
    for key, value in payload.model_dump().items():
        setattr(subject, key, value)
    db.commit()
    db.refresh(subject)
    return {
        "success": True,
        "data": SubjectSchema.model_validate(subject),
        "message": "과목 정보가 수정되었습니다",
    }


# ✅ [DELETE] 과목 삭제 (성적이 있으면 불가)
@router.delete("/{subject_id}")
def delete_subject(subject_id: int, db: Session = Depends(get_db)):
    subject = _get_or_404(db, subject_id)
    if db.query(GradeEntryModel.id).filter(GradeEntryModel.subject_id == subject_id).first():
        raise ConflictError("성적이 있는 과목은 삭제할 수 없습니다", subject_id=subject_id)
    db.delete(subject)
    db.commit()
    return {"success": True, "message": f"과목 {subject_id} 삭제 완료"}
