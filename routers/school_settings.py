from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dependencies.db import get_db
from schemas.school_settings import SchoolSettingUpsert
from services import settings_service

router = APIRouter(prefix="/settings", tags=["학교 설정"])


# ==========================================================
# [1단계] 정적 라우터
# ==========================================================

# ✅ [READ] 전체 설정
@router.get("/")
def read_settings(db: Session = Depends(get_db)):
    rows = settings_service.list_settings(db)
    return {"success": True, "data": [settings_service.serialize(r) for r in rows]}


# ✅ [GRADING] 성적 계산에 실제 적용되는 파라미터 (기본값 + DB 값)
@router.get("/grading")
def read_grading_config(db: Session = Depends(get_db)):
    return {"success": True, "data": settings_service.get_grading_config(db)}


# ✅ [INITIALIZE] 기본 설정 생성 (이미 있는 키는 유지)
@router.post("/initialize")
def initialize_settings(db: Session = Depends(get_db)):
    result = settings_service.initialize_defaults(db)
    return {
        "success": True,
        "data": result,
        "message": f"기본 설정 {len(result['created'])}건 생성",
    }


# ==========================================================
# [2단계] 키 단위 라우터
# ==========================================================

# ✅ [READ] 단일 설정
@router.get("/{key}")
def read_setting(key: str, db: Session = Depends(get_db)):
    setting = settings_service.get_setting(db, key)
    return {"success": True, "data": settings_service.serialize(setting)}


# ✅ [UPSERT] 설정 저장 (성적 파라미터는 적용 후 유효성 검사)
@router.put("/{key}")
def upsert_setting(key: str, payload: SchoolSettingUpsert, db: Session = Depends(get_db)):
    setting = settings_service.upsert_setting(db, key, payload.value, payload.type, payload.description)
    return {
        "success": True,
        "data": settings_service.serialize(setting),
        "message": f"설정 '{key}' 저장 완료",
    }


# ✅ [DELETE] 설정 삭제 (성적 파라미터는 환경설정 기본값으로 돌아감)
@router.delete("/{key}")
def delete_setting(key: str, db: Session = Depends(get_db)):
    settings_service.delete_setting(db, key)
    return {"success": True, "message": f"설정 '{key}' 삭제 완료"}
