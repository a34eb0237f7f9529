from sqlalchemy import Column, Integer, String, Date, Boolean
from database.db import Base


class SchoolYear(Base):
    __tablename__ = "school_years"  # 학년도 테이블

    id = Column(Integer, primary_key=True, index=True)         # 학년도 고유 ID (PK)
    name = Column(String(20), nullable=False, unique=True)     # 학년도 이름 (예: 2024-2025)
    start_date = Column(Date, nullable=False)                  # 시작일
    end_date = Column(Date, nullable=False)                    # 종료일
    is_current = Column(Boolean, default=False)                # 현재 학년도 여부
