import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from schemas.common import ErrorDetail, ErrorResponse
from services.errors import SchoolError

logger = logging.getLogger(__name__)


def _error_body(code: str, message: str, details=None) -> dict:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details))
    return body.model_dump(mode="json", exclude_none=True)


def add_error_handlers(app: FastAPI):
    # ✅ 도메인 예외 → 예외 클래스에 정의된 status_code / code 로 응답
    @app.exception_handler(SchoolError)
    async def school_error_handler(request: Request, exc: SchoolError):
        logger.info(f"{request.method} {request.url.path} → {exc.code}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.code, exc.message))

    # ✅ 요청 바디/쿼리 검증 실패 (pydantic)
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]
        return JSONResponse(
            status_code=422,
            content=_error_body("VALIDATION_ERROR", "요청 값이 올바르지 않습니다", details),
        )

    # ✅ 그 외 처리되지 않은 예외
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"처리되지 않은 오류: {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content=_error_body("INTERNAL_ERROR", str(exc)))
