"""
services/row_extractor.py

엑셀 한 행(헤더 → 셀 값) 에서 학생 식별 정보를 추출.
업로드마다 헤더 표기가 달라서, 필드별 별칭 목록을 우선순위대로 탐색한다.
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from config.settings import settings
from services.grading import format_cell, is_blank

# ✅ 필드별 헤더 별칭 (앞에 있을수록 우선)
FIELD_ALIASES: Dict[str, Sequence[str]] = {
    "student_id": ("Student ID", "studentId", "StudentID", "ID"),
    "student_name": ("Name", "Student Name", "studentName", "Full Name"),
    "class_label": ("Class", "class", "Grade", "grade"),
    "term": ("term", "Term", "Quarter", "Semester"),
    "academic_year": ("academicYear", "Academic Year", "School Year"),
}

_HEADER_NOISE = re.compile(r"[\s_\-]+")


class StudentIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    student_id: Optional[str]
    student_name: Optional[str]
    class_label: Optional[str]
    term: str
    academic_year: str


def normalize_header(header: Any) -> str:
    # "Student ID" / "student_id" / "StudentID" → "studentid"
    return _HEADER_NOISE.sub("", str(header)).lower()


def lookup(row: Mapping[str, Any], aliases: Sequence[str]) -> Any:
    """
    별칭을 순서대로 확인해 처음으로 값이 채워진 셀을 반환.
    정확히 일치하는 헤더를 먼저 보고, 없으면 대소문자/공백 무시 비교.
    """
    normalized: Dict[str, List[str]] = {}
    for key in row:
        normalized.setdefault(normalize_header(key), []).append(key)

    for alias in aliases:
        if alias in row and not is_blank(row[alias]):
            return row[alias]
        # 같은 이름으로 정규화되는 헤더가 여럿이면 값이 있는 첫 번째 헤더
        for key in normalized.get(normalize_header(alias), ()):
            if not is_blank(row[key]):
                return row[key]
    return None


def extract_identity(
    row: Mapping[str, Any],
    aliases: Optional[Mapping[str, Sequence[str]]] = None,
    default_term: Optional[str] = None,
    default_academic_year: Optional[str] = None,
) -> StudentIdentity:
    """한 행에서 학번/이름/반/학기/학년도 추출. 누락 여부 판단은 하지 않음."""
    aliases = {**FIELD_ALIASES, **(aliases or {})}
    term = format_cell(lookup(row, aliases["term"]))
    academic_year = format_cell(lookup(row, aliases["academic_year"]))

    return StudentIdentity(
        student_id=format_cell(lookup(row, aliases["student_id"])),
        student_name=format_cell(lookup(row, aliases["student_name"])),
        class_label=format_cell(lookup(row, aliases["class_label"])),
        term=term or default_term or settings.DEFAULT_TERM,
        academic_year=academic_year or default_academic_year or settings.DEFAULT_ACADEMIC_YEAR,
    )
