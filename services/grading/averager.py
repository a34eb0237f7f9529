"""
과목 평균 계산 (Subject Averager)

- 한 학생/과목/기간의 성적 목록 → 계수 가중 평균
- 성적이 없거나 계수 합이 0이면 평균 없음(None): 해당 과목은 종합 평균에서 제외
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Tuple

from schemas.grading import SubjectAverage


def round_half_up(value: float, precision: int = 2) -> float:
    """소수 precision 자리 사사오입 (round()의 banker's rounding 대신 사용)"""
    quantum = Decimal(1).scaleb(-precision)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def weighted_mean(pairs: Iterable[Tuple[float, float]]) -> Optional[float]:
    """(값, 가중치) 목록의 가중 평균. 가중치 합이 0 이하면 None"""
    total_points = 0.0
    total_weight = 0.0
    for value, weight in pairs:
        if weight <= 0:
            continue
        total_points += value * weight
        total_weight += weight

    if total_weight <= 0:
        return None
    return total_points / total_weight


def subject_average(entries, precision: int = 2) -> Optional[float]:
    """entries: value / coefficient 속성을 가진 객체 목록"""
    mean = weighted_mean((e.value, e.coefficient) for e in entries)
    if mean is None:
        return None
    return round_half_up(mean, precision)


def group_by_subject(entries) -> Dict[int, List]:
    grouped: Dict[int, List] = {}
    for entry in entries:
        grouped.setdefault(entry.subject_id, []).append(entry)
    return grouped


def group_by_student(entries) -> Dict[int, List]:
    grouped: Dict[int, List] = {}
    for entry in entries:
        grouped.setdefault(entry.student_id, []).append(entry)
    return grouped


def subject_averages(entries, precision: int = 2) -> Dict[int, SubjectAverage]:
    """
    한 학생/기간의 전체 성적 → {subject_id: SubjectAverage}
    평균을 낼 수 없는 과목은 결과에 포함되지 않습니다.
    """
    averages: Dict[int, SubjectAverage] = {}
    for subject_id, subject_entries in group_by_subject(entries).items():
        average = subject_average(subject_entries, precision)
        if average is None:
            continue
        first = subject_entries[0]
        averages[subject_id] = SubjectAverage(
            student_id=first.student_id,
            subject_id=subject_id,
            period_id=first.period_id,
            average=average,
            coefficient_total=sum(e.coefficient for e in subject_entries),
            entry_count=len(subject_entries),
        )
    return averages
