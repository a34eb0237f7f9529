from fastapi import Query

from schemas.common import Pagination


# ✅ 목록 조회 공통 페이징 파라미터 (?page=1&size=50)
def get_pagination(
    page: int = Query(1, ge=1, description="현재 페이지(1부터 시작)"),
    size: int = Query(50, ge=1, le=200, description="페이지당 항목 수"),
) -> Pagination:
    return Pagination(page=page, size=size)
