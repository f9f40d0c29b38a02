from jinja2 import Environment, FileSystemLoader, select_autoescape
from pathlib import Path
from typing import Any, Dict, List, Optional

from config.settings import settings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class PDFService:
    def __init__(self, template_dir: Optional[str] = None):
        # 템플릿 환경 설정 (상대 경로는 프로젝트 루트 기준)
        template_path = Path(template_dir or settings.TEMPLATE_DIR)
        if not template_path.is_absolute():
            template_path = PROJECT_ROOT / template_path
        self.env = Environment(
            loader=FileSystemLoader(template_path),
            autoescape=select_autoescape(["html"]),
        )

    def _render_template(self, template_name: str, data: Dict[str, Any]) -> str:
        """템플릿을 렌더링하여 HTML 생성"""
        template = self.env.get_template(template_name)
        return template.render(**data)

    def _html_to_pdf(self, html_content: str) -> bytes:
        """HTML을 PDF로 변환"""
        # weasyprint 는 pango 등 시스템 라이브러리가 필요해서 변환 시점에 import
        import weasyprint

        base_url = settings.WEASYPRINT_FONT_DIR or str(PROJECT_ROOT)
        return weasyprint.HTML(string=html_content, base_url=base_url).write_pdf()

    def render_report_card_html(self, report: Dict[str, Any]) -> str:
        return self._render_template("report_card.html", {"reports": [report], "school_name": settings.SCHOOL_NAME})

    def generate_report_card_pdf(self, report: Dict[str, Any]) -> bytes:
        """학생 1명 성적표 PDF 생성"""
        return self._html_to_pdf(self.render_report_card_html(report))

    def generate_bulk_report_pdf(self, reports: List[Dict[str, Any]]) -> bytes:
        """학생별 1페이지씩 묶은 성적표 PDF 생성"""
        html = self._render_template("report_card.html", {"reports": reports, "school_name": settings.SCHOOL_NAME})
        return self._html_to_pdf(html)
