from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from dependencies.security import get_current_user
from dependencies.storage import get_store
from schemas.report_cards import ReportRequest
from services.pdf_service import PDFService
from services.report_service import generate_bulk_reports, generate_student_report
from services.storage.base import GradeStore

router = APIRouter(prefix="/reports", tags=["성적표 PDF"])

pdf_service = PDFService()

def get_pdf_service() -> PDFService:
    return pdf_service


def _pdf_response(filename: str, content: bytes, report_count: int) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={
            # 한글 등 비 ASCII 이름도 깨지지 않도록 RFC 5987 형식 사용
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}",
            "X-Report-Count": str(report_count),
        },
    )


# ✅ [READ] 발급된 성적표 이력 조회 (최신순)
@router.get("")
def read_report_cards(store: GradeStore = Depends(get_store)):
    cards = store.list_report_cards()
    return {
        "success": True,
        "data": [c.model_dump(mode="json") for c in cards],
        "message": "성적표 발급 이력 조회 완료"
    }


# ✅ [PDF] 학생 1명 성적표 생성
@router.post("/generate")
def generate_report(
    request: ReportRequest,
    store: GradeStore = Depends(get_store),
    pdf: PDFService = Depends(get_pdf_service),
    user: str = Depends(get_current_user),
):
    filename, content, _ = generate_student_report(store, pdf, request.upload_id, request.student_id, generated_by=user)
    return _pdf_response(filename, content, 1)


# ✅ [PDF] 업로드 전체 학생 성적표 일괄 생성 (학생당 1페이지)
@router.post("/bulk/{upload_id}")
def generate_bulk(
    upload_id: int,
    store: GradeStore = Depends(get_store),
    pdf: PDFService = Depends(get_pdf_service),
    user: str = Depends(get_current_user),
):
    filename, content, cards = generate_bulk_reports(store, pdf, upload_id, generated_by=user)
    return _pdf_response(filename, content, len(cards))
