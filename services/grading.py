"""
services/grading.py

과목 셀 값 → 등급/평점 정규화.

- 숫자(0~100) 이면 고정 구간표로 등급 변환, 원점수는 그대로 보존
- 13개 등급 기호 중 하나면 그대로 사용 (원점수 칸에도 등급을 그대로 기록)
- 그 외에는 등급을 빈 문자열로 두고, 판단은 validator 에 맡김
"""

import math
from typing import Any, Optional, Tuple

# ✅ 인식하는 과목 컬럼 (순서 = 처리 순서)
SUBJECTS = (
    "Mathematics", "English", "Social Studies", "Science",
    "History", "Physics", "Chemistry", "Biology",
)

# ✅ 13단계 등급 (높은 순)
LETTER_GRADES = ("A+", "A", "A-", "B+", "B", "B-", "C+", "C", "C-", "D+", "D", "D-", "F")

# ✅ 점수 하한 → 등급 (내림차순, 60 미만은 F)
GRADE_THRESHOLDS = (
    (97, "A+"), (93, "A"), (90, "A-"),
    (87, "B+"), (83, "B"), (80, "B-"),
    (77, "C+"), (73, "C"), (70, "C-"),
    (67, "D+"), (63, "D"), (60, "D-"),
)

# ✅ 등급 → 평점 (기존 성적표와 호환되도록 값 그대로 유지)
GPA_TABLE = {
    "A+": "4.0", "A": "3.7", "A-": "3.3",
    "B+": "3.0", "B": "2.7", "B-": "2.3",
    "C+": "2.0", "C": "1.7", "C-": "1.3",
    "D+": "1.0", "D": "0.7", "D-": "0.3",
    "F": "0.0",
}

NUMERIC = "numeric"
LETTER = "letter"
INVALID = "invalid"


def is_blank(value: Any) -> bool:
    """None / 빈 문자열 / 공백 문자열 / NaN 은 '값 없음'"""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def format_cell(value: Any) -> Optional[str]:
    """셀 값을 문자열로 변환 (78.0 → "78")"""
    if is_blank(value):
        return None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    try:
        return str(value).strip()
    except ValueError:
        # 자릿수 제한(4300자리)을 넘는 정수
        return f"<{value.bit_length()}-bit integer>"


def parse_score(value: Any) -> Optional[float]:
    """0~100 범위의 숫자로 해석되면 float, 아니면 None"""
    if isinstance(value, bool) or is_blank(value):
        return None
    try:
        score = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(score) or not 0 <= score <= 100:
        return None
    return score


def derive_letter(score: float) -> str:
    for threshold, letter in GRADE_THRESHOLDS:
        if score >= threshold:
            return letter
    return "F"


def gpa_for(letter: Optional[str]) -> str:
    return GPA_TABLE.get(letter or "", "0.0")


def classify_cell(value: Any) -> Tuple[str, str, Optional[str]]:
    """
    셀 값 분류.
    반환: (분류, 등급, 원점수 문자열)
    - numeric: ("numeric", 변환 등급, 원점수)
    - letter : ("letter", 등급, 등급)
    - invalid: ("invalid", "", 원본 값)
    """
    score = parse_score(value)
    if score is not None:
        return NUMERIC, derive_letter(score), format_cell(value)

    text = format_cell(value)
    if text in LETTER_GRADES:
        return LETTER, text, text
    return INVALID, "", text
