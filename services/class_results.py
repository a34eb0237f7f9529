"""
services/class_results.py

반/기간 단위 계산 묶음
- 반의 재학 학생 전체 → 과목 평균 → 종합 평균 → 석차 → 학급 통계
- 성적이 없는 학생은 석차/통계에서 제외 (0점 처리하지 않음)
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from models.students import Student as StudentModel
from models.subjects import Subject as SubjectModel
from schemas.grading import ClassStatistics, GradingConfig, RankingEntry, StudentOverall, SubjectAverage
from services.grade_service import class_period_entries, student_period_entries
from services.grading.aggregator import student_overall
from services.grading.averager import group_by_student, subject_averages
from services.grading.ranking import class_statistics, competition_ranks

logger = logging.getLogger(__name__)


class ClassResults:
    """한 반/기간의 계산 결과 (요청 단위로 만들고 버림)"""

    def __init__(self, class_id: int, period_id: int, students: List[StudentModel],
                 entries_by_student: Dict[int, list],
                 averages_by_student: Dict[int, Dict[int, SubjectAverage]],
                 overalls: Dict[int, StudentOverall],
                 ranking: List[RankingEntry],
                 statistics: Optional[ClassStatistics]):
        self.class_id = class_id
        self.period_id = period_id
        self.students = students
        self.entries_by_student = entries_by_student
        self.averages_by_student = averages_by_student
        self.overalls = overalls
        self.ranking = ranking
        self.statistics = statistics
        self._rank_index = {r.student_id: r for r in ranking}

    def rank_of(self, student_id: int) -> Optional[RankingEntry]:
        return self._rank_index.get(student_id)

    def student(self, student_id: int) -> Optional[StudentModel]:
        return next((s for s in self.students if s.id == student_id), None)


def subject_weights(db: Session) -> Dict[int, float]:
    return {subject_id: weight for subject_id, weight in db.query(SubjectModel.id, SubjectModel.weight).all()}


def compute_class_results(db: Session, class_id: int, period_id: int, config: GradingConfig) -> ClassResults:
    students = (
        db.query(StudentModel)
        .filter(StudentModel.class_id == class_id, StudentModel.is_active.is_(True))
        .order_by(StudentModel.last_name.asc(), StudentModel.first_name.asc(), StudentModel.id.asc())
        .all()
    )
    entries_by_student = group_by_student(class_period_entries(db, class_id, period_id))
    weights = subject_weights(db)

    averages_by_student: Dict[int, Dict[int, SubjectAverage]] = {}
    overalls: Dict[int, StudentOverall] = {}
    for student in students:
        averages = subject_averages(entries_by_student.get(student.id, []), config.average_precision)
        averages_by_student[student.id] = averages
        overall = student_overall(averages, weights, config.subject_weighting, config.average_precision)
        if overall is not None:
            overalls[student.id] = overall

    # 동점자 표시 순서: 성, 이름, id
    display_order = {s.id: position for position, s in enumerate(students)}
    ranking = competition_ranks(overalls.values(), tie_key=display_order.get)
    statistics = class_statistics(
        [o.average for o in overalls.values()],
        config.grade_bands,
        config.pass_mark,
        config.average_precision,
    )

    logger.info(
        f"반 계산 완료: class_id={class_id} period_id={period_id} "
        f"학생 {len(students)}명 중 석차 대상 {len(ranking)}명"
    )
    return ClassResults(class_id, period_id, students, entries_by_student,
                        averages_by_student, overalls, ranking, statistics)


def student_period_summary(db: Session, student_id: int, period_id: int, config: GradingConfig) -> Dict:
    """학생 1명/기간의 과목별 평균 + 종합 평균 (석차 없이)"""
    entries = student_period_entries(db, student_id, period_id)
    averages = subject_averages(entries, config.average_precision)
    overall = student_overall(averages, subject_weights(db), config.subject_weighting, config.average_precision)
    names = {s.id: s.name for s in db.query(SubjectModel.id, SubjectModel.name).all()}

    details = [
        {
            "subject_id": avg.subject_id,
            "subject_name": names.get(avg.subject_id, str(avg.subject_id)),
            "average": avg.average,
            "coefficient_total": avg.coefficient_total,
            "entry_count": avg.entry_count,
        }
        for avg in averages.values()
    ]
    details.sort(key=lambda d: d["subject_name"])
    return {
        "student_id": student_id,
        "period_id": period_id,
        "average": overall.average if overall else None,
        "entry_count": len(entries),
        "subject_count": overall.subject_count if overall else 0,
        "details": details,
    }
