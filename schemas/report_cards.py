"""
schemas/report_cards.py

- ReportCard: DB에 저장된 성적표 레코드
- ReportCardData: 템플릿에 그대로 치환되는 완성된(flat) 성적표 데이터
  (렌더러는 계산을 하지 않음)
- ClassGenerationResult: 반 단위 일괄 생성 결과 (성공/실패 요약)
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from schemas.grading import ClassStatistics


class ReportCard(BaseModel):
    id: int
    student_id: int
    period_id: int
    class_id: int
    overall_average: Optional[float] = None
    class_rank: Optional[int] = None
    general_appreciation: Optional[str] = None
    generated_at: Optional[datetime] = None
    is_generated: bool

    model_config = ConfigDict(from_attributes=True)


class GenerateReportCardRequest(BaseModel):
    # 값을 보내면 기존 종합 의견을 덮어쓰고, 생략하면 기존 의견 유지
    general_appreciation: Optional[str] = Field(None, max_length=1000)


class AppreciationUpdate(BaseModel):
    general_appreciation: Optional[str] = Field(None, max_length=1000)


class EntryRow(BaseModel):
    value: float
    coefficient: int
    evaluation_type: str
    appreciation: Optional[str] = None


class SubjectRow(BaseModel):
    subject_id: int
    subject_name: str
    subject_code: str
    weight: float
    coefficient_total: int
    entries: List[EntryRow]
    average: Optional[float] = None      # 계수 합이 0이면 평균 없음
    mention: Optional[str] = None


class StudentIdentity(BaseModel):
    id: int
    first_name: str
    last_name: str
    registration_number: str


class ReportCardData(BaseModel):
    school_name: str
    school_address: str = ""
    student: StudentIdentity
    class_id: int
    class_name: str
    period_id: int
    period_name: str
    period_kind: str
    is_final: bool                       # 기간 확정 후 생성된 공식 성적표 여부
    subjects: List[SubjectRow]
    overall_average: float
    mention: str
    class_rank: int
    class_size: int
    class_statistics: ClassStatistics
    grade_max: float
    appreciation: Optional[str] = None
    generated_at: datetime


class GeneratedCard(BaseModel):
    student_id: int
    student_name: str
    report_card_id: int
    overall_average: float
    class_rank: int


class GenerationFailure(BaseModel):
    student_id: int
    student_name: str
    code: str
    reason: str


class ClassGenerationResult(BaseModel):
    class_id: int
    period_id: int
    total_students: int
    succeeded_count: int
    failed_count: int
    succeeded: List[GeneratedCard] = Field(default_factory=list)
    failed: List[GenerationFailure] = Field(default_factory=list)
