from sqlalchemy import Column, Integer, String
from database.db import Base


class SchoolSetting(Base):
    __tablename__ = "school_settings"  # 학교별 성적 파라미터 (key/value)

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, nullable=False)    # 예: grade_max
    value = Column(String(255), nullable=False)               # 문자열로 저장, type에 따라 변환
    type = Column(String(20), nullable=False)                 # number / string / boolean
    description = Column(String(255))
