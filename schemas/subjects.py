from pydantic import BaseModel, ConfigDict, Field


class SubjectCreate(BaseModel):
    name: str                                   # 과목 이름
    code: str                                   # 과목 코드
    weight: float = Field(1.0, gt=0)            # 종합 평균 가중치 (subject_weight 정책)


class Subject(SubjectCreate):
    id: int

    model_config = ConfigDict(from_attributes=True)
