"""
services/report_service.py

승인된 업로드의 성적 기록으로 성적표 PDF 를 만들고 발급 이력(ReportCard)을 남긴다.

- 업로드가 approved 상태여야 함
- 반려(rejected)된 학생은 발급 대상에서 제외
- PDF 는 응답으로만 내보내고 저장하지 않음
"""

import logging
import re
from typing import Any, Dict, List, Sequence, Tuple

from schemas.grades import GradeRecord
from schemas.report_cards import ReportCard, ReportCardCreate
from services.errors import BadRequestError, NotFoundError
from services.grading import parse_score
from services.pdf_service import PDFService
from services.storage.base import GradeStore
from services.workflow import APPROVED, REJECTED, aggregate_status
from utils.timeutil import utcnow

logger = logging.getLogger(__name__)

_YEAR_LABEL = re.compile(r"^[A-Za-z]*\s*\d+")


def grade_label(class_label: str) -> str:
    """반 표기에서 학년 부분만 추출 (S1A → S1, 7-A → 7). 추출 불가 시 반 표기 그대로"""
    match = _YEAR_LABEL.match(class_label or "")
    return match.group(0).replace(" ", "") if match else (class_label or "-")


def build_report(records: Sequence[GradeRecord]) -> Dict[str, Any]:
    """한 학생의 성적 기록 → 템플릿 컨텍스트"""
    first = records[0]
    rows = sorted(records, key=lambda r: r.subject)
    scores = [s for s in (parse_score(r.numeric_grade) for r in rows) if s is not None]
    gpas = [float(r.gpa or 0) for r in rows]

    return {
        "student_id": first.student_id,
        "student_name": first.student_name,
        "class_label": first.class_label or "-",
        "term": first.term,
        "academic_year": first.academic_year,
        "subjects": [
            {"subject": r.subject, "score": r.numeric_grade, "grade": r.grade, "gpa": r.gpa}
            for r in rows
        ],
        "average_score": f"{sum(scores) / len(scores):.1f}" if scores else "-",
        "overall_gpa": f"{sum(gpas) / len(gpas):.2f}" if gpas else "0.00",
        "generated_on": utcnow().strftime("%Y-%m-%d"),
    }


def _approved_upload_grades(store: GradeStore, upload_id: int) -> List[GradeRecord]:
    upload = store.get_upload(upload_id)
    if upload is None:
        raise NotFoundError("Upload not found")
    if upload.status != APPROVED:
        raise BadRequestError("Upload is not approved")
    return store.get_grades_by_upload(upload_id)


def _record_report_card(store: GradeStore, upload_id: int, records: Sequence[GradeRecord], generated_by: str) -> ReportCard:
    first = records[0]
    return store.create_report_card(
        ReportCardCreate(
            student_id=first.student_id,
            student_name=first.student_name,
            grade=grade_label(first.class_label),
            class_label=first.class_label or "-",
            term=first.term,
            academic_year=first.academic_year,
            upload_id=upload_id,
            generated_by=generated_by,
        )
    )


def generate_student_report(
    store: GradeStore, pdf_service: PDFService, upload_id: int, student_id: str, generated_by: str
) -> Tuple[str, bytes, ReportCard]:
    grades = _approved_upload_grades(store, upload_id)
    records = [g for g in grades if g.student_id == student_id]
    if not records:
        raise NotFoundError("No grades found for student")
    if aggregate_status(records) == REJECTED:
        raise BadRequestError("Student records were rejected")

    pdf = pdf_service.generate_report_card_pdf(build_report(records))
    card = _record_report_card(store, upload_id, records, generated_by)
    logger.info("report card generated: upload_id=%s student_id=%s by=%s", upload_id, student_id, generated_by)
    return f"{records[0].student_name}_Report_Card.pdf", pdf, card


def generate_bulk_reports(
    store: GradeStore, pdf_service: PDFService, upload_id: int, generated_by: str
) -> Tuple[str, bytes, List[ReportCard]]:
    grades = _approved_upload_grades(store, upload_id)

    by_student: Dict[str, List[GradeRecord]] = {}
    for g in grades:
        by_student.setdefault(g.student_id, []).append(g)
    eligible = [records for records in by_student.values() if aggregate_status(records) != REJECTED]
    if not eligible:
        raise NotFoundError("No eligible students for this upload")

    pdf = pdf_service.generate_bulk_report_pdf([build_report(records) for records in eligible])
    cards = [_record_report_card(store, upload_id, records, generated_by) for records in eligible]
    logger.info("bulk report cards generated: upload_id=%s count=%d by=%s", upload_id, len(cards), generated_by)
    return f"Upload_{upload_id}_Report_Cards.pdf", pdf, cards
