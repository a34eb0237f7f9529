from sqlalchemy import Column, Integer, String, ForeignKey
from database.db import Base


class SchoolClass(Base):
    __tablename__ = "classes"

    id = Column(Integer, primary_key=True, index=True)                  # 학급 고유 ID (PK)
    name = Column(String(100), nullable=False)                          # 학급 이름 (예: 6ème A)
    level = Column(String(50))                                          # 학년/단계 (예: 6ème)

    # ✅ 소속 학년도 (선택)
    school_year_id = Column(Integer, ForeignKey("school_years.id"), nullable=True)
