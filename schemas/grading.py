"""
schemas/grading.py

- 평균/석차 계산 결과를 담는 파생(derived) 스키마
- DB에 원본으로 저장되지 않으며, 성적표 생성 시점마다 grade_entries에서 다시 계산됩니다.
"""

from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field


class GradingConfig(BaseModel):
    """DB 설정(school_settings) + 환경설정 기본값을 합친 최종 성적 파라미터"""
    grade_min: float = 0.0
    grade_max: float = 20.0
    pass_mark: float = 10.0
    default_coefficient: int = 1
    average_precision: int = Field(2, ge=0, le=6)
    subject_weighting: Literal["subject_weight", "coefficient_total"] = "subject_weight"
    report_format: str = "standard"
    grade_bands: Dict[str, float] = Field(default_factory=dict)


class SubjectAverage(BaseModel):
    student_id: int
    subject_id: int
    period_id: int
    average: float                # 계수 가중 평균 (반올림 적용)
    coefficient_total: int        # 해당 과목 성적 계수 합
    entry_count: int


class StudentOverall(BaseModel):
    student_id: int
    period_id: int
    average: float
    subject_count: int


class RankingEntry(BaseModel):
    student_id: int
    rank: int
    average: float


class ClassStatistics(BaseModel):
    student_count: int
    mean: float
    highest: float
    lowest: float
    median: float
    pass_count: int
    distribution: Dict[str, int]   # 구간 이름 → 학생 수 (하한 높은 순)


class SubjectStatistics(BaseModel):
    subject_id: int
    subject_name: str
    entry_count: int
    mean: float
    highest: float
    lowest: float
    distribution: Dict[str, int]


class ClassRankingRow(BaseModel):
    rank: int
    student_id: int
    first_name: str
    last_name: str
    registration_number: str
    average: float
    mention: str


class ClassStatisticsReport(BaseModel):
    class_id: int
    period_id: int
    statistics: Optional[ClassStatistics] = None
    ranking: List[ClassRankingRow] = Field(default_factory=list)
