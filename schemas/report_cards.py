from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# ==========================================================
# [입력용 스키마]
# ==========================================================
class ReportRequest(BaseModel):
    upload_id: int = Field(validation_alias=AliasChoices("upload_id", "uploadId"))      # 원본 업로드 ID
    student_id: str = Field(validation_alias=AliasChoices("student_id", "studentId"))   # 학번


class ReportCardCreate(BaseModel):
    student_id: str
    student_name: str
    grade: str                          # 학년 표기
    class_label: str                    # 반
    term: str
    academic_year: str
    upload_id: int
    generated_by: str


# ==========================================================
# [출력용 스키마]
# ==========================================================
class ReportCard(ReportCardCreate):
    id: int
    generated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
