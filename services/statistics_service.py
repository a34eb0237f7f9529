"""
services/statistics_service.py

- 반/기간 통계 + 상세 석차표
- 과목별 통계 (개별 점수 기준: 건수, 평균, 최고, 최저, 구간 분포)
"""

from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from models.classes import SchoolClass as SchoolClassModel
from models.subjects import Subject as SubjectModel
from schemas.grading import ClassRankingRow, ClassStatisticsReport, SubjectStatistics
from services.class_results import compute_class_results
from services.errors import NotFoundError
from services.grade_service import class_period_entries
from services.grading.averager import group_by_subject, round_half_up
from services.grading.ranking import band_for, distribution
from services.period_service import get_period
from services.settings_service import get_grading_config


def _ensure_class(db: Session, class_id: int) -> SchoolClassModel:
    school_class = db.query(SchoolClassModel).filter(SchoolClassModel.id == class_id).first()
    if school_class is None:
        raise NotFoundError("학급을 찾을 수 없습니다", class_id=class_id)
    return school_class


def class_statistics_report(db: Session, class_id: int, period_id: int) -> ClassStatisticsReport:
    _ensure_class(db, class_id)
    get_period(db, period_id)
    config = get_grading_config(db)
    results = compute_class_results(db, class_id, period_id, config)

    rows: List[ClassRankingRow] = []
    for entry in results.ranking:
        student = results.student(entry.student_id)
        rows.append(ClassRankingRow(
            rank=entry.rank,
            student_id=student.id,
            first_name=student.first_name,
            last_name=student.last_name,
            registration_number=student.registration_number,
            average=entry.average,
            mention=band_for(entry.average, config.grade_bands),
        ))

    return ClassStatisticsReport(
        class_id=class_id,
        period_id=period_id,
        statistics=results.statistics,
        ranking=rows,
    )


def subject_statistics(db: Session, class_id: int, period_id: int,
                       subject_id: Optional[int] = None) -> List[SubjectStatistics]:
    _ensure_class(db, class_id)
    get_period(db, period_id)
    config = get_grading_config(db)

    entries = class_period_entries(db, class_id, period_id)
    if subject_id is not None:
        entries = [e for e in entries if e.subject_id == subject_id]
    names: Dict[int, str] = {s.id: s.name for s in db.query(SubjectModel).all()}

    stats: List[SubjectStatistics] = []
    for sid, subject_entries in group_by_subject(entries).items():
        values = [e.value for e in subject_entries]
        stats.append(SubjectStatistics(
            subject_id=sid,
            subject_name=names.get(sid, str(sid)),
            entry_count=len(values),
            mean=round_half_up(sum(values) / len(values), config.average_precision),
            highest=max(values),
            lowest=min(values),
            distribution=distribution(values, config.grade_bands),
        ))
    return sorted(stats, key=lambda s: s.subject_name)
