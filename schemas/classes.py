from typing import Optional
from pydantic import BaseModel, ConfigDict


# ✅ 생성(Create) 요청용 스키마
# → id는 DB에서 자동 생성되므로 제외
class ClassCreate(BaseModel):
    name: str                                # 학급 이름
    level: Optional[str] = None              # 학년/단계
    school_year_id: Optional[int] = None     # 학년도 ID


# ✅ 응답(Response) / 조회(Read) 용 스키마
class SchoolClass(ClassCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)
