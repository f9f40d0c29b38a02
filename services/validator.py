"""
services/validator.py

행 → (검증 통과 성적 후보, 오류 항목) 분리.

한 행의 과목들은 각각 독립적으로 판정한다. 네 과목 중 하나만 잘못돼도
나머지 세 과목은 정상 기록으로 남는다. 인식되는 과목 칸이 모두 비어 있는
행은 어느 쪽에도 기록되지 않는다.
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence

from schemas.grades import GradeCandidate, ValidationErrorEntry, ValidationResult
from services.grading import SUBJECTS, classify_cell, gpa_for, is_blank
from services.row_extractor import StudentIdentity, extract_identity, lookup

logger = logging.getLogger(__name__)


def normalize_subjects(
    row: Mapping[str, Any],
    identity: StudentIdentity,
    subjects: Sequence[str] = SUBJECTS,
) -> List[GradeCandidate]:
    """값이 채워진 과목 칸마다 성적 후보 생성"""
    normalized = []
    for subject in subjects:
        raw = lookup(row, (subject,))
        if is_blank(raw):
            continue

        _, letter, numeric = classify_cell(raw)
        candidate = GradeCandidate(
            student_id=identity.student_id,
            student_name=identity.student_name,
            subject=subject,
            grade=letter,
            numeric_grade=numeric,
            class_label=identity.class_label,
            term=identity.term,
            academic_year=identity.academic_year,
            gpa=gpa_for(letter),
        )
        normalized.append(candidate)
    return normalized


def check_candidate(candidate: GradeCandidate) -> List[str]:
    violations = []
    if not candidate.student_id:
        violations.append("Missing Student ID")
    if not candidate.student_name:
        violations.append("Missing Student Name")
    if not candidate.grade:
        violations.append(f"Invalid {candidate.subject} grade: {candidate.numeric_grade}")
    return violations


def validate_rows(
    rows: Sequence[Mapping[str, Any]],
    subjects: Sequence[str] = SUBJECTS,
    aliases: Optional[Mapping[str, Sequence[str]]] = None,
) -> ValidationResult:
    result = ValidationResult()

    for index, row in enumerate(rows, start=1):
        identity = extract_identity(row, aliases=aliases)
        for candidate in normalize_subjects(row, identity, subjects):
            violations = check_candidate(candidate)
            if violations:
                result.errors.append(
                    ValidationErrorEntry(row=index, errors=violations, data=candidate, subject=candidate.subject)
                )
            else:
                result.validated_grades.append(candidate)

    logger.debug(
        "validated %d rows: %d grades, %d errors",
        len(rows), len(result.validated_grades), len(result.errors),
    )
    return result
