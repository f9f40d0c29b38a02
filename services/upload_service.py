"""
services/upload_service.py

엑셀 업로드 처리 흐름:
  파일 검사 → 행 파싱 → Upload 생성 → 검증 → 성적 저장 → 집계 저장

파일 자체가 잘못된 경우(형식/크기/파싱 실패)는 Upload 를 만들기 전에 거절한다.
저장 단계의 실패는 재시도하지 않는다. 만들어 둔 Upload 를 지우고 예외를 그대로 올린다.
"""

import logging
import time
from typing import Optional

from config.settings import settings
from schemas.grades import GradeCreate
from schemas.uploads import IngestResult, UploadCreate
from services.aggregator import compute_upload_counts
from services.errors import FileRejectedError, FileTooLargeError
from services.spreadsheet import read_rows
from services.storage.base import GradeStore
from services.validator import validate_rows
from utils.timeutil import utcnow

logger = logging.getLogger(__name__)


def check_file(filename: Optional[str], mime_type: Optional[str], size: int):
    if not filename:
        raise FileRejectedError("No file uploaded")
    if mime_type not in settings.ALLOWED_UPLOAD_MIME_TYPES:
        raise FileRejectedError("Only Excel files are allowed")
    if size > settings.max_upload_bytes:
        raise FileTooLargeError(f"File exceeds the {settings.MAX_UPLOAD_MB}MB limit")
    if size == 0:
        raise FileRejectedError("Uploaded file is empty")


def ingest_spreadsheet(
    store: GradeStore,
    content: bytes,
    original_name: str,
    mime_type: str,
    uploaded_by: str,
    auto_approve: Optional[bool] = None,
) -> IngestResult:
    check_file(original_name, mime_type, len(content))
    rows = read_rows(content)
    if not rows:
        raise FileRejectedError("Spreadsheet contains no data rows")

    if auto_approve is None:
        auto_approve = settings.UPLOAD_AUTO_APPROVE

    upload = store.create_upload(
        UploadCreate(
            filename=f"{int(time.time() * 1000)}_{original_name}",
            original_name=original_name,
            file_size=len(content),
            mime_type=mime_type,
            uploaded_by=uploaded_by,
            status="approved" if auto_approve else "pending",
            approved_at=utcnow() if auto_approve else None,
            approved_by=uploaded_by if auto_approve else None,
        )
    )
    logger.info("upload accepted: id=%s file=%s size=%d rows=%d", upload.id, original_name, len(content), len(rows))

    result = validate_rows(rows)
    counts = compute_upload_counts(rows, result)
    try:
        grades = store.create_grades(
            [GradeCreate(**candidate.model_dump(), upload_id=upload.id) for candidate in result.validated_grades]
        )
        upload = store.update_upload(upload.id, validation_results=result, **counts.model_dump())
    except Exception:
        # 저장 도중 실패하면 업로드 전체를 취소 (집계 없는 pending 업로드를 남기지 않음)
        logger.exception("upload persistence failed, discarding upload id=%s", upload.id)
        store.delete_upload(upload.id)
        raise
    logger.info(
        "upload validated: id=%s total=%d valid=%d errors=%d",
        upload.id, counts.total_count, counts.valid_count, counts.error_count,
    )

    return IngestResult(upload=upload, grades=grades, errors=result.errors)
