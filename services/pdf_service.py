from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from config.settings import settings
from schemas.report_cards import ReportCardData

# 분포 구간 키 → 성적표 표기
MENTION_LABELS = {
    "excellent": "Excellent",
    "very_good": "Très bien",
    "good": "Bien",
    "fair": "Assez bien",
    "insufficient": "Insuffisant",
}

EVALUATION_LABELS = {
    "normal": "Note",
    "quiz": "Interrogation",
    "exam": "Examen",
    "homework": "Devoir",
}


def format_average(value: Optional[float], precision: int = 2) -> str:
    if value is None:
        return "-"
    return f"{value:.{precision}f}"


def mention_label(key: Optional[str]) -> str:
    if not key:
        return "-"
    return MENTION_LABELS.get(key, key)


class PDFService:
    def __init__(self, template_dir: Optional[Path] = None):
        # 템플릿 환경 설정 (템플릿은 값 치환만 하고 계산하지 않음)
        self.template_dir = Path(template_dir or settings.TEMPLATE_DIR)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["average"] = format_average
        self.env.filters["mention_label"] = mention_label
        self.env.filters["evaluation_label"] = lambda key: EVALUATION_LABELS.get(key, key)

    def _render_template(self, template_name: str, data: dict) -> str:
        """템플릿을 렌더링하여 HTML 생성"""
        template = self.env.get_template(template_name)
        return template.render(**data)

    def _html_to_pdf(self, html_content: str) -> bytes:
        """HTML을 PDF로 변환"""
        # WeasyPrint는 pango 등 시스템 라이브러리를 로드하므로 실제 변환 시점에 import
        import weasyprint

        return weasyprint.HTML(string=html_content, base_url=str(self.template_dir)).write_pdf()

    def render_report_cards_html(self, cards: List[ReportCardData]) -> str:
        """성적표 여러 장을 한 문서로 (한 장당 한 페이지)"""
        return self._render_template("report_card.html", {"cards": cards})

    def generate_report_card_pdf(self, card: ReportCardData) -> bytes:
        """학생 1명 성적표 PDF 생성"""
        return self._html_to_pdf(self.render_report_cards_html([card]))

    def generate_class_report_cards_pdf(self, cards: List[ReportCardData]) -> bytes:
        """학급 전체 성적표 PDF 생성"""
        return self._html_to_pdf(self.render_report_cards_html(cards))
