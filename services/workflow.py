"""
services/workflow.py

업로드 / 학생 단위 승인·반려 상태 전이.

상태: pending → approved | rejected (approved, rejected 는 종착 상태)
- 같은 상태로 다시 전이하면 아무것도 바꾸지 않고 현재 값을 돌려줌
- 종착 상태에서 다른 종착 상태로 가려 하면 InvalidTransitionError
- 업로드 승인은 오류 항목이 0 건일 때만 가능
- 학생 반려는 공백이 아닌 사유가 필수이며, 해당 학생의 모든 기록에 같은 사유를 남김
"""

import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from schemas.grades import GradeRecord, StudentSummary, SubjectSummary
from schemas.uploads import Upload
from services.errors import BadRequestError, InvalidTransitionError, NotFoundError
from services.storage.base import GradeStore
from utils.timeutil import utcnow

logger = logging.getLogger(__name__)

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"

TRANSITIONS = {
    PENDING: {APPROVED, REJECTED},
    APPROVED: set(),
    REJECTED: set(),
}


def _check_transition(current: str, target: str, what: str):
    if current != target and target not in TRANSITIONS.get(current, set()):
        raise InvalidTransitionError(f"{what} is already {current} and cannot be {target}")


# ==========================================================
# [업로드 단위]
# ==========================================================

def _get_upload_or_404(store: GradeStore, upload_id: int) -> Upload:
    upload = store.get_upload(upload_id)
    if upload is None:
        raise NotFoundError("Upload not found")
    return upload


def approve_upload(store: GradeStore, upload_id: int, reviewer: str) -> Upload:
    upload = _get_upload_or_404(store, upload_id)
    _check_transition(upload.status, APPROVED, "Upload")
    if upload.status == APPROVED:
        return upload
    if upload.error_count:
        raise BadRequestError(
            f"Upload has {upload.error_count} validation error(s) and cannot be approved"
        )

    logger.info("upload approved: upload_id=%s reviewer=%s", upload_id, reviewer)
    return store.update_upload(upload_id, status=APPROVED, approved_at=utcnow(), approved_by=reviewer)


def reject_upload(store: GradeStore, upload_id: int, reviewer: str) -> Upload:
    upload = _get_upload_or_404(store, upload_id)
    _check_transition(upload.status, REJECTED, "Upload")
    if upload.status == REJECTED:
        return upload

    logger.info("upload rejected: upload_id=%s reviewer=%s", upload_id, reviewer)
    return store.update_upload(upload_id, status=REJECTED, approved_at=utcnow(), approved_by=reviewer)


# ==========================================================
# [학생 단위]
# ==========================================================

def aggregate_status(records: Sequence[GradeRecord]) -> str:
    """한 명이라도 반려 → rejected, 아니면 승인 기록이 있으면 approved, 그 외 pending"""
    statuses = {r.status or PENDING for r in records}
    if REJECTED in statuses:
        return REJECTED
    if APPROVED in statuses:
        return APPROVED
    return PENDING


def student_records(store: GradeStore, upload_id: int, student_id: str) -> List[GradeRecord]:
    _get_upload_or_404(store, upload_id)
    records = [g for g in store.get_grades_by_upload(upload_id) if g.student_id == student_id]
    if not records:
        raise NotFoundError("No grades found for student")
    return records


def approve_student(store: GradeStore, upload_id: int, student_id: str, reviewer: str) -> List[GradeRecord]:
    records = student_records(store, upload_id, student_id)
    current = aggregate_status(records)
    _check_transition(current, APPROVED, f"Student {student_id}")
    if current == APPROVED:
        return records

    logger.info("student approved: upload_id=%s student_id=%s reviewer=%s", upload_id, student_id, reviewer)
    return store.update_grades(
        [r.id for r in records],
        status=APPROVED, rejection_reason=None, reviewed_by=reviewer, reviewed_at=utcnow(),
    )


def reject_student(
    store: GradeStore, upload_id: int, student_id: str, reviewer: str, reason: Optional[str]
) -> List[GradeRecord]:
    reason = (reason or "").strip()
    if not reason:
        raise BadRequestError("Rejection reason is required")

    records = student_records(store, upload_id, student_id)
    current = aggregate_status(records)
    _check_transition(current, REJECTED, f"Student {student_id}")
    if current == REJECTED:
        return records

    logger.info("student rejected: upload_id=%s student_id=%s reviewer=%s", upload_id, student_id, reviewer)
    return store.update_grades(
        [r.id for r in records],
        status=REJECTED, rejection_reason=reason, reviewed_by=reviewer, reviewed_at=utcnow(),
    )


def summarize_students(records: Sequence[GradeRecord]) -> List[StudentSummary]:
    """업로드의 성적 기록을 학생별로 묶어 상태/과목 요약 생성 (업로드 순서 유지)"""
    grouped: Dict[str, List[GradeRecord]] = OrderedDict()
    for record in records:
        grouped.setdefault(record.student_id, []).append(record)

    summaries = []
    for student_id, items in grouped.items():
        status = aggregate_status(items)
        reason = next((r.rejection_reason for r in items if r.status == REJECTED and r.rejection_reason), None)
        summaries.append(
            StudentSummary(
                student_id=student_id,
                student_name=items[0].student_name,
                class_label=items[0].class_label,
                status=status,
                rejection_reason=reason,
                subjects={
                    r.subject: SubjectSummary(score=r.numeric_grade, grade=r.grade, gpa=r.gpa, status=r.status or PENDING)
                    for r in items
                },
            )
        )
    return summaries
