from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from database.db import Base


class Student(Base):
    __tablename__ = "students"  # 학생 기본 정보 테이블

    id = Column(Integer, primary_key=True, index=True)                        # 고유 학생 ID (PK)
    first_name = Column(String(100), nullable=False)                          # 이름
    last_name = Column(String(100), nullable=False)                           # 성
    registration_number = Column(String(50), unique=True, nullable=False)     # 학번 (matricule)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=True, index=True)  # 소속 반 ID
    is_active = Column(Boolean, default=True, nullable=False)                 # 재학 여부 (석차/일괄 생성 대상)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
