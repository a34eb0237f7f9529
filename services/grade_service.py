"""
services/grade_service.py

성적 쓰기 경계
- 모든 생성/수정/삭제는 기간 행 잠금(lock_period) 후 같은 트랜잭션에서 수행
- 점수 범위는 school_settings(grade_min/grade_max) 기준
- 변경마다 grade_history 이력 기록
"""

import logging
import math
from typing import List, Optional

from sqlalchemy.orm import Session

from models.grades import GradeEntry as GradeEntryModel, GradeHistory as GradeHistoryModel
from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel
from schemas.common import Pagination, paginate
from schemas.grades import GradeEntryCreate, GradeEntryUpdate
from schemas.grading import GradingConfig
from services.errors import NotFoundError, ValidationError
from services.period_service import ensure_grades_writable, lock_period
from services.settings_service import get_grading_config

logger = logging.getLogger(__name__)


def _check_value(value: float, config: GradingConfig) -> None:
    if not math.isfinite(value):
        raise ValidationError("점수는 유한한 숫자여야 합니다", value=value)
    if value < config.grade_min or value > config.grade_max:
        raise ValidationError(
            f"점수는 {config.grade_min:g} ~ {config.grade_max:g} 사이여야 합니다", value=value
        )


def _record(db: Session, entry_id: int, action: str, old_value=None, new_value=None, comment=None) -> None:
    db.add(GradeHistoryModel(
        grade_entry_id=entry_id,
        action=action,
        old_value=old_value,
        new_value=new_value,
        comment=comment,
    ))


def get_grade(db: Session, grade_id: int) -> GradeEntryModel:
    entry = db.query(GradeEntryModel).filter(GradeEntryModel.id == grade_id).first()
    if entry is None:
        raise NotFoundError("성적을 찾을 수 없습니다", grade_id=grade_id)
    return entry


# ==========================================================
# [쓰기]
# ==========================================================
def create_grade(db: Session, data: GradeEntryCreate) -> GradeEntryModel:
    period = lock_period(db, data.period_id)
    ensure_grades_writable(period)

    config = get_grading_config(db)
    _check_value(data.value, config)

    if db.query(StudentModel.id).filter(StudentModel.id == data.student_id).first() is None:
        raise NotFoundError("학생을 찾을 수 없습니다", student_id=data.student_id)
    if db.query(SubjectModel.id).filter(SubjectModel.id == data.subject_id).first() is None:
        raise NotFoundError("과목을 찾을 수 없습니다", subject_id=data.subject_id)

    values = data.model_dump()
    if values["coefficient"] is None:
        values["coefficient"] = config.default_coefficient

    entry = GradeEntryModel(**values)
    db.add(entry)
    db.flush()
    _record(db, entry.id, "create", new_value=entry.value,
            comment=f"성적 생성: {entry.value:g}/{config.grade_max:g}")
    db.commit()
    db.refresh(entry)

    logger.info(f"성적 생성: id={entry.id} student_id={entry.student_id} subject_id={entry.subject_id} value={entry.value}")
    return entry


def update_grade(db: Session, grade_id: int, data: GradeEntryUpdate) -> GradeEntryModel:
    entry = get_grade(db, grade_id)
    period = lock_period(db, entry.period_id)
    ensure_grades_writable(period)

    changes = data.model_dump(exclude_unset=True)
    if changes.get("value") is not None:
        _check_value(changes["value"], get_grading_config(db))
    for required in ("value", "coefficient", "evaluation_type"):
        if required in changes and changes[required] is None:
            raise ValidationError(f"{required} 값은 비울 수 없습니다")

    old_value = entry.value
    for key, value in changes.items():
        setattr(entry, key, value)

    _record(db, entry.id, "update", old_value=old_value, new_value=entry.value,
            comment=f"성적 수정: {old_value:g} → {entry.value:g}")
    db.commit()
    db.refresh(entry)

    logger.info(f"성적 수정: id={entry.id} {old_value} → {entry.value}")
    return entry


def delete_grade(db: Session, grade_id: int) -> None:
    entry = get_grade(db, grade_id)
    period = lock_period(db, entry.period_id)
    ensure_grades_writable(period)

    _record(db, entry.id, "delete", old_value=entry.value, comment=f"성적 삭제: {entry.value:g}")
    db.delete(entry)
    db.commit()
    logger.info(f"성적 삭제: id={grade_id}")


# ==========================================================
# [조회] - 성적표 계산 입력 (학생/기간, 반/기간)
# ==========================================================
def student_period_entries(db: Session, student_id: int, period_id: int) -> List[GradeEntryModel]:
    return (
        db.query(GradeEntryModel)
        .filter(GradeEntryModel.student_id == student_id, GradeEntryModel.period_id == period_id)
        .order_by(GradeEntryModel.subject_id.asc(), GradeEntryModel.id.asc())
        .all()
    )


def class_period_entries(db: Session, class_id: int, period_id: int, active_only: bool = True) -> List[GradeEntryModel]:
    query = (
        db.query(GradeEntryModel)
        .join(StudentModel, StudentModel.id == GradeEntryModel.student_id)
        .filter(StudentModel.class_id == class_id, GradeEntryModel.period_id == period_id)
    )
    if active_only:
        query = query.filter(StudentModel.is_active.is_(True))
    return query.order_by(GradeEntryModel.student_id.asc(), GradeEntryModel.id.asc()).all()


def list_grades(
    db: Session,
    pagination: Pagination,
    student_id: Optional[int] = None,
    subject_id: Optional[int] = None,
    period_id: Optional[int] = None,
    class_id: Optional[int] = None,
    is_validated: Optional[bool] = None,
):
    query = db.query(GradeEntryModel)
    if class_id is not None:
        query = query.join(StudentModel, StudentModel.id == GradeEntryModel.student_id).filter(
            StudentModel.class_id == class_id
        )
    if student_id is not None:
        query = query.filter(GradeEntryModel.student_id == student_id)
    if subject_id is not None:
        query = query.filter(GradeEntryModel.subject_id == subject_id)
    if period_id is not None:
        query = query.filter(GradeEntryModel.period_id == period_id)
    if is_validated is not None:
        query = query.filter(GradeEntryModel.is_validated.is_(is_validated))
    return paginate(query.order_by(GradeEntryModel.id.asc()), pagination)


def grade_history(db: Session, grade_id: int) -> List[GradeHistoryModel]:
    return (
        db.query(GradeHistoryModel)
        .filter(GradeHistoryModel.grade_entry_id == grade_id)
        .order_by(GradeHistoryModel.created_at.desc(), GradeHistoryModel.id.desc())
        .all()
    )
