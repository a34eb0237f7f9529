from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

EvaluationType = Literal["normal", "quiz", "exam", "homework"]


# ✅ 성적 입력 요청
# - 점수 범위(grade_min~grade_max)는 설정값에 따라 달라지므로 서비스 계층에서 검사
class GradeEntryCreate(BaseModel):
    student_id: int                                      # 학생 ID
    subject_id: int                                      # 과목 ID
    period_id: int                                       # 평가 기간 ID
    value: float = Field(..., allow_inf_nan=False)       # 점수 (NaN/Infinity 불가)
    coefficient: Optional[int] = Field(None, ge=0)       # 계수 (없으면 default_coefficient)
    evaluation_type: EvaluationType = "normal"
    appreciation: Optional[str] = Field(None, max_length=500)


# ✅ 성적 수정 요청 - 학생/과목/기간은 변경 불가
class GradeEntryUpdate(BaseModel):
    value: Optional[float] = Field(None, allow_inf_nan=False)
    coefficient: Optional[int] = Field(None, ge=0)
    evaluation_type: Optional[EvaluationType] = None
    appreciation: Optional[str] = Field(None, max_length=500)


class GradeEntry(BaseModel):
    id: int
    student_id: int
    subject_id: int
    period_id: int
    value: float
    coefficient: int
    evaluation_type: str
    appreciation: Optional[str] = None
    is_validated: bool
    validated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class GradeHistory(BaseModel):
    id: int
    grade_entry_id: Optional[int] = None
    action: str
    old_value: Optional[float] = None
    new_value: Optional[float] = None
    comment: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
