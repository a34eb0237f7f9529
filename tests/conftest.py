import os
from datetime import date

# 앱 import 전에 테스트용 환경변수 설정 (메모리 SQLite)
os.environ["ENV"] = "test"
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite://"
os.environ.setdefault("DB_USER", "test")
os.environ.setdefault("DB_PASSWORD", "test")
os.environ.setdefault("DB_HOST", "localhost")
os.environ.setdefault("DB_NAME", "test")

import pytest
from fastapi.testclient import TestClient

from database.db import Base, SessionLocal, engine
from models.classes import SchoolClass
from models.grades import GradeEntry
from models.periods import Period
from models import report_cards, school_settings  # noqa: F401
from models.school_years import SchoolYear
from models.students import Student
from models.subjects import Subject
from main import app


@pytest.fixture(autouse=True)
def reset_schema():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


class Factory:
    """테스트 데이터 생성 (즉시 commit)"""

    def __init__(self, db):
        self.db = db
        self._seq = 0

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def _next(self):
        self._seq += 1
        return self._seq

    def school_year(self, name="2024-2025", is_current=True):
        return self._save(SchoolYear(
            name=name, start_date=date(2024, 9, 1), end_date=date(2025, 7, 1), is_current=is_current,
        ))

    def school_class(self, name="6ème A", school_year=None):
        return self._save(SchoolClass(
            name=name, level="6ème", school_year_id=school_year.id if school_year else None,
        ))

    def student(self, school_class, first_name="Awa", last_name="Diallo", is_active=True):
        return self._save(Student(
            first_name=first_name,
            last_name=last_name,
            registration_number=f"MAT-{self._next():04d}",
            class_id=school_class.id if school_class else None,
            is_active=is_active,
        ))

    def subject(self, name="Mathématiques", code=None, weight=1.0):
        return self._save(Subject(name=name, code=code or f"S{self._next()}", weight=weight))

    def period(self, school_year, name="1er trimestre", is_active=True, is_validated=False,
               start=date(2024, 9, 1), end=date(2024, 12, 20)):
        return self._save(Period(
            name=name, kind="term", start_date=start, end_date=end,
            school_year_id=school_year.id, is_active=is_active, is_validated=is_validated,
        ))

    def grade(self, student, subject, period, value, coefficient=1, evaluation_type="normal"):
        return self._save(GradeEntry(
            student_id=student.id, subject_id=subject.id, period_id=period.id,
            value=value, coefficient=coefficient, evaluation_type=evaluation_type,
        ))


@pytest.fixture
def factory(db):
    return Factory(db)


@pytest.fixture
def school(factory):
    """학년도 1개, 반 1개, 과목 2개(수학/프랑스어), 활성 기간 1개"""
    year = factory.school_year()
    return {
        "year": year,
        "class": factory.school_class(school_year=year),
        "math": factory.subject("Mathématiques", code="MATH"),
        "french": factory.subject("Français", code="FR"),
        "period": factory.period(year),
    }
