from sqlalchemy import Column, Integer, Float, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from database.db import Base


class ReportCard(Base):
    __tablename__ = "report_cards"  # 성적표(bulletin) 테이블 - 학생/기간당 1건
    __table_args__ = (UniqueConstraint("student_id", "period_id", name="uq_report_card_student_period"),)

    id = Column(Integer, primary_key=True, index=True)                                   # 성적표 고유 ID
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)  # 학생 ID
    period_id = Column(Integer, ForeignKey("periods.id"), nullable=False, index=True)    # 평가 기간 ID
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False)                 # 생성 시점의 학급 ID
    overall_average = Column(Float)                                                      # 종합 평균
    class_rank = Column(Integer)                                                         # 반 석차
    general_appreciation = Column(String(1000))                                          # 종합 의견 (생성 후에도 수정 가능)
    generated_at = Column(DateTime)                                                      # 생성 시각
    is_generated = Column(Boolean, default=False, nullable=False)
