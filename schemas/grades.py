from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from schemas.common import ReviewStatus


# ==========================================================
# [검증 파이프라인용 스키마]
# ==========================================================
class GradeCandidate(BaseModel):
    """엑셀 한 행 × 한 과목에서 만들어진 성적 후보"""
    student_id: Optional[str] = None        # 학번 (없으면 검증 오류)
    student_name: Optional[str] = None      # 이름 (없으면 검증 오류)
    subject: str                            # 과목명
    grade: str = ""                         # 등급 (해석 불가 시 빈 문자열)
    numeric_grade: Optional[str] = None     # 원점수 또는 입력된 등급 그대로
    class_label: Optional[str] = None       # 반
    term: str                               # 학기/분기
    academic_year: str                      # 학년도
    gpa: str = "0.0"                        # 평점


class ValidationErrorEntry(BaseModel):
    row: int                                # 원본 데이터 행 번호 (1부터)
    errors: List[str]                       # 위반 메시지 목록
    data: GradeCandidate                    # 표시/디버깅용 후보 데이터
    subject: str


class ValidationResult(BaseModel):
    validated_grades: List[GradeCandidate] = Field(default_factory=list)
    errors: List[ValidationErrorEntry] = Field(default_factory=list)


# ==========================================================
# [저장/출력용 스키마]
# ==========================================================
class GradeCreate(GradeCandidate):
    upload_id: int
    student_id: str
    student_name: str
    is_valid: bool = True
    validation_error: Optional[str] = None
    status: ReviewStatus = "pending"
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None


class GradeRecord(GradeCreate):
    id: int
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StudentDecision(BaseModel):
    """학생 단위 승인/반려 요청 본문"""
    reason: Optional[str] = None


class SubjectSummary(BaseModel):
    score: Optional[str] = None
    grade: str
    gpa: Optional[str] = None
    status: ReviewStatus = "pending"


class StudentSummary(BaseModel):
    student_id: str
    student_name: str
    class_label: Optional[str] = None
    status: ReviewStatus
    rejection_reason: Optional[str] = None
    subjects: Dict[str, SubjectSummary] = Field(default_factory=dict)
