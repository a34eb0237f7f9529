"""
services/period_service.py

평가 기간 상태
- 비활성 + 미확정 : 성적 입력 불가, 성적표 생성 불가 (PeriodNotOpenError)
- 활성   + 미확정 : 성적 입력/수정 가능, 성적표 생성/재생성 가능
- 확정            : 성적 잠금 (LockedPeriodError), 성적표(최종본) 생성 가능
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from database.db import utcnow
from models.grades import GradeEntry as GradeEntryModel
from models.periods import Period as PeriodModel
from models.report_cards import ReportCard as ReportCardModel
from models.school_years import SchoolYear as SchoolYearModel
from schemas.periods import PeriodCreate, PeriodUpdate
from services.errors import ConflictError, LockedPeriodError, NotFoundError, PeriodNotOpenError, ValidationError

logger = logging.getLogger(__name__)


def get_period(db: Session, period_id: int) -> PeriodModel:
    period = db.query(PeriodModel).filter(PeriodModel.id == period_id).first()
    if period is None:
        raise NotFoundError("기간을 찾을 수 없습니다", period_id=period_id)
    return period


def lock_period(db: Session, period_id: int) -> PeriodModel:
    """
    기간 행을 SELECT ... FOR UPDATE 로 잠금.
    성적 쓰기와 기간 확정이 같은 행 잠금을 거치므로 '확정 여부 확인 → 쓰기' 사이에 확정이 끼어들 수 없음
    """
    period = (
        db.query(PeriodModel)
        .filter(PeriodModel.id == period_id)
        .with_for_update()
        .first()
    )
    if period is None:
        raise NotFoundError("기간을 찾을 수 없습니다", period_id=period_id)
    return period


def ensure_grades_writable(period: PeriodModel) -> None:
    if period.is_validated:
        raise LockedPeriodError(
            f"확정된 기간({period.name})의 성적은 변경할 수 없습니다", period_id=period.id
        )
    if not period.is_active:
        raise PeriodNotOpenError(
            f"기간({period.name})이 열려 있지 않습니다", period_id=period.id
        )


def ensure_generation_allowed(period: PeriodModel) -> None:
    if not period.is_validated and not period.is_active:
        raise PeriodNotOpenError(
            f"기간({period.name})이 열려 있지 않아 성적표를 생성할 수 없습니다", period_id=period.id
        )


# ==========================================================
# [조회]
# ==========================================================
def list_periods(db: Session, school_year_id: Optional[int] = None) -> List[PeriodModel]:
    query = db.query(PeriodModel)
    if school_year_id is not None:
        query = query.filter(PeriodModel.school_year_id == school_year_id)
    return query.order_by(PeriodModel.start_date.asc()).all()


def active_periods(db: Session) -> List[PeriodModel]:
    """현재 학년도의 활성(미확정) 기간"""
    return (
        db.query(PeriodModel)
        .join(SchoolYearModel, SchoolYearModel.id == PeriodModel.school_year_id)
        .filter(
            PeriodModel.is_active.is_(True),
            PeriodModel.is_validated.is_(False),
            SchoolYearModel.is_current.is_(True),
        )
        .order_by(PeriodModel.start_date.asc())
        .all()
    )


# ==========================================================
# [생성/수정/삭제]
# ==========================================================
def _check_overlap(db: Session, school_year_id: int, start_date, end_date, exclude_id=None) -> None:
    query = db.query(PeriodModel).filter(
        PeriodModel.school_year_id == school_year_id,
        PeriodModel.start_date <= end_date,
        PeriodModel.end_date >= start_date,
    )
    if exclude_id is not None:
        query = query.filter(PeriodModel.id != exclude_id)
    if query.first() is not None:
        raise ConflictError("같은 학년도의 다른 기간과 날짜가 겹칩니다")


def create_period(db: Session, data: PeriodCreate) -> PeriodModel:
    year = db.query(SchoolYearModel).filter(SchoolYearModel.id == data.school_year_id).first()
    if year is None:
        raise NotFoundError("학년도를 찾을 수 없습니다", school_year_id=data.school_year_id)

    _check_overlap(db, data.school_year_id, data.start_date, data.end_date)

    period = PeriodModel(**data.model_dump())
    db.add(period)
    db.commit()
    db.refresh(period)
    logger.info(f"기간 생성: id={period.id} name={period.name}")
    return period


def update_period(db: Session, period_id: int, data: PeriodUpdate) -> PeriodModel:
    period = lock_period(db, period_id)
    changes = data.model_dump(exclude_unset=True)
    for required in ("name", "kind", "start_date", "end_date", "is_active"):
        if required in changes and changes[required] is None:
            raise ValidationError(f"{required} 값은 비울 수 없습니다", period_id=period_id)

    start_date = changes.get("start_date", period.start_date)
    end_date = changes.get("end_date", period.end_date)
    dates_changed = start_date != period.start_date or end_date != period.end_date

    if period.is_validated and dates_changed:
        raise LockedPeriodError("확정된 기간의 날짜는 변경할 수 없습니다", period_id=period.id)
    if start_date >= end_date:
        raise ValidationError("시작일은 종료일보다 앞서야 합니다")
    if dates_changed:
        _check_overlap(db, period.school_year_id, start_date, end_date, exclude_id=period.id)

    for key, value in changes.items():
        setattr(period, key, value)

    db.commit()
    db.refresh(period)
    return period


def delete_period(db: Session, period_id: int) -> None:
    period = get_period(db, period_id)
    has_grades = db.query(GradeEntryModel.id).filter(GradeEntryModel.period_id == period_id).first()
    has_cards = db.query(ReportCardModel.id).filter(ReportCardModel.period_id == period_id).first()
    if has_grades or has_cards:
        raise ConflictError("성적 또는 성적표가 있는 기간은 삭제할 수 없습니다", period_id=period_id)

    db.delete(period)
    db.commit()
    logger.info(f"기간 삭제: id={period_id}")


def validate_period(db: Session, period_id: int) -> int:
    """
    기간 확정: 한 트랜잭션 안에서 기간 행을 잠그고, 소속 성적 전체를 확정 처리.
    반환값은 잠긴 성적 건수.
    """
    period = lock_period(db, period_id)
    if period.is_validated:
        raise ConflictError("이미 확정된 기간입니다", period_id=period_id)

    now = utcnow()
    locked = (
        db.query(GradeEntryModel)
        .filter(GradeEntryModel.period_id == period_id)
        .update({"is_validated": True, "validated_at": now}, synchronize_session=False)
    )
    period.is_validated = True
    period.validated_at = now
    db.commit()

    logger.info(f"기간 확정: id={period_id} 잠긴 성적 {locked}건")
    return locked
