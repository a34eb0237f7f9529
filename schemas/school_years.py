from datetime import date
from pydantic import BaseModel, ConfigDict, model_validator


# ✅ 입력용
class SchoolYearCreate(BaseModel):
    name: str                    # 예: 2024-2025
    start_date: date
    end_date: date
    is_current: bool = False

    @model_validator(mode="after")
    def _check_dates(self):
        if self.start_date >= self.end_date:
            raise ValueError("start_date must be before end_date")
        return self


# ✅ 출력용
class SchoolYear(SchoolYearCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)
