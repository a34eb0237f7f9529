"""
services/errors.py

- 서비스 계층에서 발생시키는 도메인 예외 모음
- 라우터는 잡지 않고 그대로 올려보내며, middlewares/error_handler.py에서
  code/status_code를 이용해 공통 에러 응답으로 변환합니다.
"""


class SchoolError(Exception):
    """도메인 예외 최상위 클래스"""
    code = "SCHOOL_ERROR"
    status_code = 400

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context


class ValidationError(SchoolError):
    """입력값 오류 (점수 범위 초과, 필수값 누락 등) - 저장되지 않음"""
    code = "VALIDATION_ERROR"
    status_code = 422


class LockedPeriodError(SchoolError):
    """확정(validated)된 기간의 성적을 생성/수정/삭제하려는 경우"""
    code = "PERIOD_LOCKED"
    status_code = 409


class PeriodNotOpenError(SchoolError):
    """활성화되지 않은(미확정) 기간에 성적 입력/성적표 생성을 시도하는 경우"""
    code = "PERIOD_NOT_OPEN"
    status_code = 409


class InsufficientDataError(SchoolError):
    """평균을 계산할 성적이 없는 학생의 성적표 생성"""
    code = "INSUFFICIENT_DATA"
    status_code = 422


class NotFoundError(SchoolError):
    code = "NOT_FOUND"
    status_code = 404


class ConflictError(SchoolError):
    """중복/상태 충돌 (이미 확정된 기간, 기간 겹침, 삭제 불가 등)"""
    code = "CONFLICT"
    status_code = 409
