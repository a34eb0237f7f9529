from typing import Optional
from pydantic import BaseModel, ConfigDict


# ✅ 입력용 (POST)
class StudentCreate(BaseModel):
    first_name: str                          # 이름
    last_name: str                           # 성
    registration_number: str                 # 학번 (matricule)
    class_id: Optional[int] = None           # 소속 반 ID
    is_active: bool = True


# ✅ 수정용 (PUT) - 보낸 필드만 반영
class StudentUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    class_id: Optional[int] = None
    is_active: Optional[bool] = None


# ✅ 전체 출력용 (GET, 상세조회 등)
class Student(StudentCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)
