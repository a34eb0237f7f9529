from typing import Optional

from fastapi import APIRouter, Body, Depends
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.orm import Session

from dependencies.db import get_db
from schemas.report_cards import AppreciationUpdate, GenerateReportCardRequest, ReportCard as ReportCardSchema
from services import report_card_service
from services.pdf_service import PDFService

router = APIRouter(prefix="/report-cards", tags=["성적표"])

pdf_service = PDFService()


def _pdf_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ==========================================================
# [1단계] 성적표 생성 (저장)
# ==========================================================

# ✅ [GENERATE] 학생 1명 성적표 생성/재생성
# - 평균/석차는 새로 계산, 종합 의견은 보낸 경우에만 덮어씀
@router.post("/generate/{student_id}/{period_id}")
def generate_report_card(
    student_id: int,
    period_id: int,
    payload: Optional[GenerateReportCardRequest] = Body(None),
    db: Session = Depends(get_db),
):
    appreciation = payload.general_appreciation if payload else None
    card, data = report_card_service.generate_report_card(db, student_id, period_id, appreciation)
    return {
        "success": True,
        "data": {"report_card": ReportCardSchema.model_validate(card), "details": data},
        "message": "성적표가 생성되었습니다",
    }


# ✅ [GENERATE-CLASS] 반 전체 일괄 생성 (학생 단위 실패는 결과에 포함)
@router.post("/generate-class/{class_id}/{period_id}")
def generate_class_report_cards(class_id: int, period_id: int, db: Session = Depends(get_db)):
    result = report_card_service.generate_class_report_cards(db, class_id, period_id)
    return {
        "success": True,
        "data": result,
        "message": f"성적표 {result.succeeded_count}건 생성, {result.failed_count}건 실패",
    }


# ==========================================================
# [2단계] 조회 / 종합 의견
# ==========================================================

# ✅ [DETAILS] 저장 없이 현재 성적 기준 성적표 데이터
@router.get("/details/{student_id}/{period_id}")
def read_report_card_details(student_id: int, period_id: int, db: Session = Depends(get_db)):
    card, data = report_card_service.report_card_details(db, student_id, period_id)
    return {
        "success": True,
        "data": {
            "report_card": ReportCardSchema.model_validate(card) if card else None,
            "details": data,
        },
    }


# ✅ [READ] 저장된 성적표 목록 (반/기간/학생 필터)
@router.get("/")
def read_report_cards(
    class_id: Optional[int] = None,
    period_id: Optional[int] = None,
    student_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    cards = report_card_service.list_report_cards(db, class_id, period_id, student_id)
    return {"success": True, "data": [ReportCardSchema.model_validate(c) for c in cards]}


# ✅ [READ] 단일 성적표
@router.get("/{report_card_id}")
def read_report_card(report_card_id: int, db: Session = Depends(get_db)):
    card = report_card_service.get_report_card(db, report_card_id)
    return {"success": True, "data": ReportCardSchema.model_validate(card)}


# ✅ [APPRECIATION] 종합 의견만 수정
@router.put("/{report_card_id}/appreciation")
def update_appreciation(report_card_id: int, payload: AppreciationUpdate, db: Session = Depends(get_db)):
    card = report_card_service.update_appreciation(db, report_card_id, payload.general_appreciation)
    return {
        "success": True,
        "data": ReportCardSchema.model_validate(card),
        "message": "종합 의견이 수정되었습니다",
    }


# ==========================================================
# [3단계] 렌더링 (HTML / PDF)
# ==========================================================

# ✅ [HTML] 학생 1명 성적표 미리보기
@router.get("/html/{student_id}/{period_id}", response_class=HTMLResponse)
def render_report_card_html(student_id: int, period_id: int, db: Session = Depends(get_db)):
    _, data = report_card_service.report_card_details(db, student_id, period_id)
    return HTMLResponse(content=pdf_service.render_report_cards_html([data]))


# ✅ [PDF] 학생 1명 성적표 PDF
@router.get("/pdf/{student_id}/{period_id}")
def download_report_card_pdf(student_id: int, period_id: int, db: Session = Depends(get_db)):
    _, data = report_card_service.report_card_details(db, student_id, period_id)
    pdf_bytes = pdf_service.generate_report_card_pdf(data)
    return _pdf_response(pdf_bytes, f"bulletin_{data.student.registration_number}_{period_id}.pdf")


# ✅ [PDF-CLASS] 반 전체 성적표 PDF (성적이 없는 학생은 제외)
@router.get("/pdf-class/{class_id}/{period_id}")
def download_class_report_cards_pdf(class_id: int, period_id: int, db: Session = Depends(get_db)):
    cards, failures = report_card_service.class_report_data(db, class_id, period_id)
    pdf_bytes = pdf_service.generate_class_report_cards_pdf(cards)
    response = _pdf_response(pdf_bytes, f"bulletins_class_{class_id}_{period_id}.pdf")
    response.headers["X-Skipped-Students"] = str(len(failures))
    return response
