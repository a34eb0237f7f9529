"""
services/report_card_service.py

성적표(bulletin) 조립/저장
- 학생 1명: 반 전체를 다시 계산(석차/통계 필요) → ReportCardData 조립 → report_cards upsert
- 반 전체: 반 계산은 한 번만 하고 학생별로 조립/저장, 학생 단위 실패는 모아서 반환
- 재생성 시 평균/석차는 새 값으로 교체, 종합 의견은 새 값을 보낸 경우에만 덮어씀
"""

import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from config.settings import settings
from database.db import utcnow
from models.classes import SchoolClass as SchoolClassModel
from models.periods import Period as PeriodModel
from models.report_cards import ReportCard as ReportCardModel
from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel
from schemas.grading import GradingConfig
from schemas.report_cards import (
    ClassGenerationResult, EntryRow, GeneratedCard, GenerationFailure,
    ReportCardData, StudentIdentity, SubjectRow,
)
from services.class_results import ClassResults, compute_class_results
from services.errors import InsufficientDataError, NotFoundError, SchoolError, ValidationError
from services.grading.averager import group_by_subject
from services.grading.ranking import band_for
from services.period_service import ensure_generation_allowed, get_period
from services.settings_service import get_grading_config

logger = logging.getLogger(__name__)


# ==========================================================
# [공통] 조회 헬퍼
# ==========================================================
def _get_student(db: Session, student_id: int) -> StudentModel:
    student = db.query(StudentModel).filter(StudentModel.id == student_id).first()
    if student is None:
        raise NotFoundError("학생을 찾을 수 없습니다", student_id=student_id)
    return student


def _get_class(db: Session, class_id: Optional[int]) -> SchoolClassModel:
    school_class = None
    if class_id is not None:
        school_class = db.query(SchoolClassModel).filter(SchoolClassModel.id == class_id).first()
    if school_class is None:
        raise NotFoundError("학급을 찾을 수 없습니다", class_id=class_id)
    return school_class


def _subjects_by_id(db: Session) -> Dict[int, SubjectModel]:
    return {s.id: s for s in db.query(SubjectModel).all()}


def get_report_card(db: Session, report_card_id: int) -> ReportCardModel:
    card = db.query(ReportCardModel).filter(ReportCardModel.id == report_card_id).first()
    if card is None:
        raise NotFoundError("성적표를 찾을 수 없습니다", report_card_id=report_card_id)
    return card


def find_report_card(db: Session, student_id: int, period_id: int) -> Optional[ReportCardModel]:
    return (
        db.query(ReportCardModel)
        .filter(ReportCardModel.student_id == student_id, ReportCardModel.period_id == period_id)
        .first()
    )


def list_report_cards(db: Session, class_id=None, period_id=None, student_id=None) -> List[ReportCardModel]:
    query = db.query(ReportCardModel)
    if class_id is not None:
        query = query.filter(ReportCardModel.class_id == class_id)
    if period_id is not None:
        query = query.filter(ReportCardModel.period_id == period_id)
    if student_id is not None:
        query = query.filter(ReportCardModel.student_id == student_id)
    return query.order_by(ReportCardModel.period_id.desc(), ReportCardModel.class_rank.asc()).all()


# ==========================================================
# [조립] 계산 결과 → 템플릿용 flat 데이터
# ==========================================================
def assemble_report_data(
    student: StudentModel,
    period: PeriodModel,
    school_class: SchoolClassModel,
    results: ClassResults,
    subjects: Dict[int, SubjectModel],
    config: GradingConfig,
    appreciation: Optional[str] = None,
) -> ReportCardData:
    overall = results.overalls.get(student.id)
    ranking_entry = results.rank_of(student.id)
    if overall is None or ranking_entry is None or results.statistics is None:
        raise InsufficientDataError(
            f"{student.full_name} 학생은 평균을 계산할 성적이 없습니다",
            student_id=student.id, period_id=period.id,
        )

    averages = results.averages_by_student.get(student.id, {})
    rows: List[SubjectRow] = []
    for subject_id, entries in group_by_subject(results.entries_by_student.get(student.id, [])).items():
        subject = subjects.get(subject_id)
        if subject is None:
            continue
        average = averages.get(subject_id)
        rows.append(SubjectRow(
            subject_id=subject_id,
            subject_name=subject.name,
            subject_code=subject.code,
            weight=subject.weight,
            coefficient_total=sum(e.coefficient for e in entries),
            entries=[
                EntryRow(value=e.value, coefficient=e.coefficient,
                         evaluation_type=e.evaluation_type, appreciation=e.appreciation)
                for e in entries
            ],
            average=average.average if average else None,
            mention=band_for(average.average, config.grade_bands) if average else None,
        ))
    rows.sort(key=lambda row: row.subject_name)

    return ReportCardData(
        school_name=settings.SCHOOL_NAME,
        school_address=settings.SCHOOL_ADDRESS,
        student=StudentIdentity(
            id=student.id,
            first_name=student.first_name,
            last_name=student.last_name,
            registration_number=student.registration_number,
        ),
        class_id=school_class.id,
        class_name=school_class.name,
        period_id=period.id,
        period_name=period.name,
        period_kind=period.kind,
        is_final=bool(period.is_validated),
        subjects=rows,
        overall_average=overall.average,
        mention=band_for(overall.average, config.grade_bands),
        class_rank=ranking_entry.rank,
        class_size=len(results.ranking),
        class_statistics=results.statistics,
        grade_max=config.grade_max,
        appreciation=appreciation,
        generated_at=utcnow(),
    )


def _upsert_report_card(db: Session, data: ReportCardData, appreciation: Optional[str]) -> ReportCardModel:
    """학생/기간당 1건. 평균/석차는 교체, 종합 의견은 appreciation이 주어졌을 때만 교체"""
    card = find_report_card(db, data.student.id, data.period_id)
    if card is None:
        card = ReportCardModel(student_id=data.student.id, period_id=data.period_id)
        db.add(card)

    card.class_id = data.class_id
    card.overall_average = data.overall_average
    card.class_rank = data.class_rank
    card.is_generated = True
    card.generated_at = data.generated_at
    if appreciation is not None:
        card.general_appreciation = appreciation

    db.flush()
    data.appreciation = card.general_appreciation
    return card


def _prepare(db: Session, student_id: int, period_id: int):
    student = _get_student(db, student_id)
    period = get_period(db, period_id)
    ensure_generation_allowed(period)
    if not student.is_active:
        raise ValidationError(f"{student.full_name} 학생은 재학 중이 아니어서 석차/성적표 대상이 아닙니다", student_id=student_id)
    if student.class_id is None:
        raise ValidationError(f"{student.full_name} 학생은 학급에 배정되어 있지 않습니다", student_id=student_id)
    school_class = _get_class(db, student.class_id)
    config = get_grading_config(db)
    results = compute_class_results(db, school_class.id, period.id, config)
    return student, period, school_class, config, results


# ==========================================================
# [생성] 학생 1명
# ==========================================================
def generate_report_card(
    db: Session, student_id: int, period_id: int, appreciation: Optional[str] = None
) -> Tuple[ReportCardModel, ReportCardData]:
    student, period, school_class, config, results = _prepare(db, student_id, period_id)
    data = assemble_report_data(student, period, school_class, results, _subjects_by_id(db), config)

    card = _upsert_report_card(db, data, appreciation)
    db.commit()
    db.refresh(card)

    logger.info(
        f"성적표 생성: student_id={student_id} period_id={period_id} "
        f"average={data.overall_average} rank={data.class_rank}/{data.class_size}"
    )
    return card, data


def report_card_details(db: Session, student_id: int, period_id: int) -> Tuple[Optional[ReportCardModel], ReportCardData]:
    """저장 없이 현재 성적 기준으로 조립 (저장된 종합 의견 포함)"""
    student, period, school_class, config, results = _prepare(db, student_id, period_id)
    card = find_report_card(db, student_id, period_id)
    data = assemble_report_data(
        student, period, school_class, results, _subjects_by_id(db), config,
        appreciation=card.general_appreciation if card else None,
    )
    return card, data


def update_appreciation(db: Session, report_card_id: int, appreciation: Optional[str]) -> ReportCardModel:
    """평균/석차 재계산 없이 종합 의견만 변경"""
    card = get_report_card(db, report_card_id)
    card.general_appreciation = appreciation
    db.commit()
    db.refresh(card)
    logger.info(f"종합 의견 수정: report_card_id={report_card_id}")
    return card


# ==========================================================
# [생성] 반 전체 (부분 실패 허용)
# ==========================================================
def generate_class_report_cards(db: Session, class_id: int, period_id: int) -> ClassGenerationResult:
    school_class = _get_class(db, class_id)
    period = get_period(db, period_id)
    ensure_generation_allowed(period)

    config = get_grading_config(db)
    results = compute_class_results(db, class_id, period_id, config)
    subjects = _subjects_by_id(db)
    total = len(results.students)

    result = ClassGenerationResult(
        class_id=class_id, period_id=period_id,
        total_students=total, succeeded_count=0, failed_count=0,
    )
    for position, student in enumerate(results.students, start=1):
        try:
            data = assemble_report_data(student, period, school_class, results, subjects, config)
            card = _upsert_report_card(db, data, appreciation=None)
            db.commit()
        except SchoolError as exc:
            # 학생 단위 도메인 오류만 모으고, DB 장애 등은 그대로 전파
            db.rollback()
            result.failed.append(GenerationFailure(
                student_id=student.id,
                student_name=student.full_name,
                code=exc.code,
                reason=exc.message,
            ))
            logger.warning(f"[{position}/{total}] 성적표 생성 실패: student_id={student.id} ({exc.code}) {exc.message}")
            continue

        result.succeeded.append(GeneratedCard(
            student_id=student.id,
            student_name=student.full_name,
            report_card_id=card.id,
            overall_average=data.overall_average,
            class_rank=data.class_rank,
        ))
        logger.info(f"[{position}/{total}] 성적표 생성: student_id={student.id} rank={data.class_rank}")

    result.succeeded_count = len(result.succeeded)
    result.failed_count = len(result.failed)
    logger.info(
        f"반 성적표 일괄 생성 완료: class_id={class_id} period_id={period_id} "
        f"성공 {result.succeeded_count} / 실패 {result.failed_count} / 전체 {total}"
    )
    return result


def class_report_data(db: Session, class_id: int, period_id: int) -> Tuple[List[ReportCardData], List[GenerationFailure]]:
    """반 전체 PDF용 데이터 (저장 없음). 조립 가능한 학생만 포함"""
    school_class = _get_class(db, class_id)
    period = get_period(db, period_id)
    ensure_generation_allowed(period)

    config = get_grading_config(db)
    results = compute_class_results(db, class_id, period_id, config)
    subjects = _subjects_by_id(db)
    appreciations = {
        card.student_id: card.general_appreciation
        for card in list_report_cards(db, period_id=period_id)
    }

    cards: List[ReportCardData] = []
    failures: List[GenerationFailure] = []
    for student in results.students:
        try:
            cards.append(assemble_report_data(
                student, period, school_class, results, subjects, config,
                appreciation=appreciations.get(student.id),
            ))
        except SchoolError as exc:
            failures.append(GenerationFailure(
                student_id=student.id, student_name=student.full_name, code=exc.code, reason=exc.message,
            ))

    if not cards:
        raise InsufficientDataError(
            "성적표를 만들 수 있는 학생이 없습니다", class_id=class_id, period_id=period_id,
        )
    return cards, failures
