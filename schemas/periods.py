from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, model_validator

PeriodKind = Literal["term", "semester"]


# ✅ 생성 요청 (시작일 < 종료일)
class PeriodCreate(BaseModel):
    name: str
    kind: PeriodKind
    start_date: date
    end_date: date
    school_year_id: int
    is_active: bool = False

    @model_validator(mode="after")
    def _check_dates(self):
        if self.start_date >= self.end_date:
            raise ValueError("start_date must be before end_date")
        return self


# ✅ 수정 요청 - 보낸 필드만 반영, 확정 여부는 /validate 로만 변경
class PeriodUpdate(BaseModel):
    name: Optional[str] = None
    kind: Optional[PeriodKind] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: Optional[bool] = None


class Period(BaseModel):
    id: int
    name: str
    kind: str
    start_date: date
    end_date: date
    school_year_id: int
    is_active: bool
    is_validated: bool
    validated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
