from sqlalchemy import Column, Integer, String, Float
from database.db import Base


class Subject(Base):
    __tablename__ = "subjects"  # 과목 정보 테이블

    id = Column(Integer, primary_key=True, index=True)           # 과목 고유 ID (PK)
    name = Column(String(100), nullable=False)                  # 과목 이름 (예: Mathématiques)
    code = Column(String(20), unique=True, nullable=False)      # 과목 코드 (예: MATH)
    weight = Column(Float, nullable=False, default=1.0)         # 교육과정 고정 가중치 (종합 평균 계산용)
