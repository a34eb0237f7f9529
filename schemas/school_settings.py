from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict

SettingType = Literal["number", "string", "boolean"]


class SchoolSettingUpsert(BaseModel):
    value: str                           # 항상 문자열로 받고 type에 맞는지 검사
    type: SettingType
    description: Optional[str] = None


class SchoolSetting(BaseModel):
    id: int
    key: str
    value: str
    type: str
    description: Optional[str] = None
    converted_value: Any = None          # type에 따라 변환된 값

    model_config = ConfigDict(from_attributes=True)
