from sqlalchemy import Column, Integer, String, Date, DateTime, Boolean, ForeignKey
from database.db import Base


class Period(Base):
    __tablename__ = "periods"  # 평가 기간 (trimestre / semestre)

    id = Column(Integer, primary_key=True, index=True)                      # 기간 고유 ID (PK)
    name = Column(String(100), nullable=False)                              # 기간 이름 (예: 1er trimestre)
    kind = Column(String(20), nullable=False)                               # term / semester
    start_date = Column(Date, nullable=False)                               # 시작일
    end_date = Column(Date, nullable=False)                                 # 종료일
    school_year_id = Column(Integer, ForeignKey("school_years.id"), nullable=False)
    is_active = Column(Boolean, default=False, nullable=False)              # 성적 입력 가능 여부
    is_validated = Column(Boolean, default=False, nullable=False)           # 확정 여부 (확정 후 성적 잠금, 되돌릴 수 없음)
    validated_at = Column(DateTime)                                         # 확정 시각
