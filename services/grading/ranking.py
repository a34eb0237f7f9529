"""
반 석차 / 학급 통계 (Class Ranker)

- 석차: 1 + (나보다 평균이 엄격히 높은 학생 수). 동점은 같은 석차, 다음 석차는 건너뜀
  예) 18, 16, 16, 14 → 1, 2, 2, 4
- 통계: 평균, 최고, 최저, 중앙값, 통과 인원, 구간 분포
"""

from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from schemas.grading import ClassStatistics, RankingEntry, StudentOverall
from services.grading.averager import round_half_up


def competition_ranks(
    overalls: Iterable[StudentOverall],
    tie_key: Optional[Callable[[int], object]] = None,
) -> List[RankingEntry]:
    """평균 내림차순 정렬 후 동점 처리. 동점 학생의 표시 순서는 tie_key(student_id)"""
    tie_key = tie_key or (lambda student_id: student_id)
    ordered = sorted(overalls, key=lambda o: (-o.average, tie_key(o.student_id)))

    ranking: List[RankingEntry] = []
    for position, overall in enumerate(ordered, start=1):
        if ranking and ranking[-1].average == overall.average:
            rank = ranking[-1].rank
        else:
            rank = position
        ranking.append(RankingEntry(student_id=overall.student_id, rank=rank, average=overall.average))
    return ranking


def ordered_bands(bands: Mapping[str, float]) -> List[tuple]:
    return sorted(bands.items(), key=lambda item: item[1], reverse=True)


def band_for(value: float, bands: Mapping[str, float]) -> str:
    """value가 속하는 구간 이름. 모든 하한보다 낮으면 가장 낮은 구간"""
    ordered = ordered_bands(bands)
    for name, lower in ordered:
        if value >= lower:
            return name
    return ordered[-1][0]


def distribution(values: Iterable[float], bands: Mapping[str, float]) -> Dict[str, int]:
    counts = {name: 0 for name, _ in ordered_bands(bands)}
    for value in values:
        counts[band_for(value, bands)] += 1
    return counts


def median(values: Sequence[float]) -> float:
    ordered = sorted(values)
    middle = len(ordered) // 2
    if len(ordered) % 2:
        return ordered[middle]
    return (ordered[middle - 1] + ordered[middle]) / 2


def class_statistics(
    averages: Sequence[float],
    bands: Mapping[str, float],
    pass_mark: float,
    precision: int = 2,
) -> Optional[ClassStatistics]:
    if not averages:
        return None

    return ClassStatistics(
        student_count=len(averages),
        mean=round_half_up(sum(averages) / len(averages), precision),
        highest=max(averages),
        lowest=min(averages),
        median=round_half_up(median(averages), precision),
        pass_count=sum(1 for a in averages if a >= pass_mark),
        distribution=distribution(averages, bands),
    )
