from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from schemas.common import ReviewStatus
from schemas.grades import GradeRecord, ValidationErrorEntry, ValidationResult


# ==========================================================
# [입력용 스키마]
# ==========================================================
class UploadCreate(BaseModel):
    filename: str                               # 저장 파일명
    original_name: str                          # 원본 파일명
    file_size: int                              # 바이트
    mime_type: str
    uploaded_by: str
    status: ReviewStatus = "pending"
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None


class UploadCounts(BaseModel):
    total_count: int = 0                        # 원본에 등장한 학생 수
    valid_count: int = 0                        # 유효 기록이 하나라도 있는 학생 수
    error_count: int = 0                        # 과목 단위 오류 항목 수


# ==========================================================
# [출력용 스키마]
# ==========================================================
class Upload(UploadCreate, UploadCounts):
    id: int
    uploaded_at: Optional[datetime] = None
    validation_results: Optional[ValidationResult] = None

    model_config = ConfigDict(from_attributes=True)


class IngestResult(BaseModel):
    """업로드 처리 결과: 부분 성공 + 실패 목록을 함께 돌려줌"""
    upload: Upload
    grades: List[GradeRecord]
    errors: List[ValidationErrorEntry]
