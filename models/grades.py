from sqlalchemy import Column, Integer, Float, String, Boolean, DateTime, ForeignKey
from database.db import Base, utcnow


class GradeEntry(Base):
    __tablename__ = "grade_entries"  # 과목별 개별 성적 입력 테이블

    id = Column(Integer, primary_key=True, index=True)                                   # 성적 고유 ID (PK)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)  # 학생 ID
    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)  # 과목 ID
    period_id = Column(Integer, ForeignKey("periods.id"), nullable=False, index=True)    # 평가 기간 ID
    value = Column(Float, nullable=False)                                                # 점수 (기본 0~20)
    coefficient = Column(Integer, nullable=False, default=1)                             # 계수 (0이면 평균에 반영 안 됨)
    evaluation_type = Column(String(20), nullable=False, default="normal")               # normal / quiz / exam / homework
    appreciation = Column(String(500))                                                   # 교사 코멘트
    is_validated = Column(Boolean, default=False, nullable=False)                        # 기간 확정 시 True
    validated_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)


class GradeHistory(Base):
    __tablename__ = "grade_history"  # 성적 변경 이력 (생성/수정/삭제)

    id = Column(Integer, primary_key=True, index=True)
    grade_entry_id = Column(Integer, index=True)      # 삭제 이후에도 이력은 남도록 FK 미사용
    action = Column(String(20), nullable=False)       # create / update / delete
    old_value = Column(Float)                         # 이전 점수
    new_value = Column(Float)                         # 새 점수
    comment = Column(String(255))
    created_at = Column(DateTime, default=utcnow)
