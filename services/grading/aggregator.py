"""
학생 종합 평균 계산 (Student Aggregator)

가중치 정책 (GradingConfig.subject_weighting)
- subject_weight    : 과목 고정 가중치(Subject.weight, 기본 1)
- coefficient_total : 해당 과목 성적 계수 합
"""

import logging
from typing import Dict, Mapping, Optional

from schemas.grading import StudentOverall, SubjectAverage
from services.grading.averager import round_half_up, weighted_mean

logger = logging.getLogger(__name__)


def subject_weight(average: SubjectAverage, subject_weights: Mapping[int, float], policy: str) -> float:
    if policy == "coefficient_total":
        return float(average.coefficient_total)
    return float(subject_weights.get(average.subject_id, 1.0))


def student_overall(
    averages: Dict[int, SubjectAverage],
    subject_weights: Mapping[int, float],
    policy: str = "subject_weight",
    precision: int = 2,
) -> Optional[StudentOverall]:
    """
    과목 평균 맵 → StudentOverall
    반영 가능한 과목이 없으면 None (0점 처리하지 않음)
    """
    pairs = [
        (avg.average, subject_weight(avg, subject_weights, policy))
        for avg in averages.values()
    ]
    mean = weighted_mean(pairs)
    if mean is None:
        return None

    first = next(iter(averages.values()))
    counted = sum(1 for _, weight in pairs if weight > 0)
    overall = StudentOverall(
        student_id=first.student_id,
        period_id=first.period_id,
        average=round_half_up(mean, precision),
        subject_count=counted,
    )
    logger.debug(f"종합 평균 계산: student_id={overall.student_id} average={overall.average} policy={policy}")
    return overall
