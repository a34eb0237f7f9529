"""
services/settings_service.py

- school_settings 테이블(key/value) 관리
- 성적 계산에 쓰이는 최종 파라미터(GradingConfig) = 환경설정 기본값 + DB 값(우선)
"""

import logging
from typing import Any, Dict, List

import pydantic
from sqlalchemy.orm import Session

from config.settings import settings
from models.school_settings import SchoolSetting as SchoolSettingModel
from schemas.grading import GradingConfig
from schemas.school_settings import SchoolSetting as SchoolSettingSchema
from services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# ✅ 기본 파라미터 (initialize 시 없는 키만 생성)
DEFAULT_SETTINGS: List[Dict[str, str]] = [
    {"key": "grade_min", "value": str(settings.GRADE_MIN), "type": "number",
     "description": "허용 최저 점수"},
    {"key": "grade_max", "value": str(settings.GRADE_MAX), "type": "number",
     "description": "허용 최고 점수"},
    {"key": "pass_mark", "value": str(settings.PASS_MARK), "type": "number",
     "description": "통과 기준 평균"},
    {"key": "default_coefficient", "value": str(settings.DEFAULT_COEFFICIENT), "type": "number",
     "description": "계수 미입력 시 기본 계수"},
    {"key": "average_precision", "value": str(settings.AVERAGE_PRECISION), "type": "number",
     "description": "평균 소수점 자릿수"},
    {"key": "subject_weighting", "value": settings.SUBJECT_WEIGHTING, "type": "string",
     "description": "종합 평균 과목 가중치 정책 (subject_weight / coefficient_total)"},
    {"key": "report_format", "value": "standard", "type": "string",
     "description": "성적표 기본 형식"},
]

GRADING_KEYS = {d["key"] for d in DEFAULT_SETTINGS}


def convert_value(value: str, type_: str) -> Any:
    if type_ == "number":
        return float(value)
    if type_ == "boolean":
        return value == "true"
    return value


def is_valid_for_type(value: str, type_: str) -> bool:
    if type_ == "number":
        try:
            float(value)
        except ValueError:
            return False
        return True
    if type_ == "boolean":
        return value in ("true", "false")
    return type_ == "string"


def serialize(setting: SchoolSettingModel) -> SchoolSettingSchema:
    return SchoolSettingSchema(
        id=setting.id,
        key=setting.key,
        value=setting.value,
        type=setting.type,
        description=setting.description,
        converted_value=convert_value(setting.value, setting.type),
    )


# ==========================================================
# [조회]
# ==========================================================
def list_settings(db: Session) -> List[SchoolSettingModel]:
    return db.query(SchoolSettingModel).order_by(SchoolSettingModel.key.asc()).all()


def get_setting(db: Session, key: str) -> SchoolSettingModel:
    setting = db.query(SchoolSettingModel).filter(SchoolSettingModel.key == key).first()
    if setting is None:
        raise NotFoundError(f"설정을 찾을 수 없습니다: {key}", key=key)
    return setting


def _build_config(overrides: Dict[str, Any]) -> GradingConfig:
    values: Dict[str, Any] = {
        "grade_min": settings.GRADE_MIN,
        "grade_max": settings.GRADE_MAX,
        "pass_mark": settings.PASS_MARK,
        "default_coefficient": settings.DEFAULT_COEFFICIENT,
        "average_precision": settings.AVERAGE_PRECISION,
        "subject_weighting": settings.SUBJECT_WEIGHTING,
        "report_format": "standard",
        "grade_bands": dict(settings.GRADE_BANDS),
    }
    values.update(overrides)
    for int_key in ("default_coefficient", "average_precision"):
        if isinstance(values[int_key], float) and values[int_key].is_integer():
            values[int_key] = int(values[int_key])

    config = GradingConfig(**values)
    if config.grade_min >= config.grade_max:
        raise ValueError("grade_min must be lower than grade_max")
    return config


def get_grading_config(db: Session) -> GradingConfig:
    """DB 값이 있으면 우선, 없으면 환경설정 기본값"""
    rows = db.query(SchoolSettingModel).filter(SchoolSettingModel.key.in_(GRADING_KEYS)).all()
    overrides = {row.key: convert_value(row.value, row.type) for row in rows}
    return _build_config(overrides)


# ==========================================================
# [변경]
# ==========================================================
def upsert_setting(db: Session, key: str, value: str, type_: str, description=None) -> SchoolSettingModel:
    if not is_valid_for_type(value, type_):
        raise ValidationError(f"값 '{value}' 이(가) 타입 {type_} 와 맞지 않습니다", key=key)

    if key in GRADING_KEYS:
        # 적용 후의 성적 파라미터가 유효한지 먼저 확인
        current = {
            row.key: convert_value(row.value, row.type)
            for row in db.query(SchoolSettingModel).filter(SchoolSettingModel.key.in_(GRADING_KEYS)).all()
        }
        current[key] = convert_value(value, type_)
        try:
            _build_config(current)
        except (pydantic.ValidationError, ValueError) as exc:
            raise ValidationError(f"잘못된 성적 설정입니다: {key}={value} ({exc})", key=key) from exc

    setting = db.query(SchoolSettingModel).filter(SchoolSettingModel.key == key).first()
    if setting is None:
        setting = SchoolSettingModel(key=key, value=value, type=type_, description=description)
        db.add(setting)
    else:
        setting.value = value
        setting.type = type_
        if description is not None:
            setting.description = description

    db.commit()
    db.refresh(setting)
    logger.info(f"설정 저장: {key}={value} ({type_})")
    return setting


def delete_setting(db: Session, key: str) -> None:
    setting = get_setting(db, key)
    db.delete(setting)
    db.commit()
    logger.info(f"설정 삭제: {key}")


def initialize_defaults(db: Session) -> Dict[str, List[str]]:
    """없는 기본 키만 생성하고 생성/기존 키 목록을 반환"""
    existing_keys = {row.key for row in db.query(SchoolSettingModel.key).all()}
    created, existing = [], []
    for default in DEFAULT_SETTINGS:
        if default["key"] in existing_keys:
            existing.append(default["key"])
            continue
        db.add(SchoolSettingModel(**default))
        created.append(default["key"])

    db.commit()
    logger.info(f"기본 설정 초기화: 생성 {len(created)}건, 기존 {len(existing)}건")
    return {"created": created, "existing": existing}
