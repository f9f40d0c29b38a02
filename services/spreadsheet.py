"""
services/spreadsheet.py

엑셀 파일 ↔ 행(dict) 변환 (pandas + openpyxl).
"""

import io
import logging
from typing import Any, Dict, List

import pandas as pd

from services.errors import FileRejectedError

logger = logging.getLogger(__name__)

# ✅ 템플릿 컬럼 (기존 업로드 양식과 호환되도록 이름/순서 고정)
TEMPLATE_COLUMNS = ["Student ID", "Name", "Class", "Mathematics", "English", "Social Studies", "Science"]

TEMPLATE_ROWS = [
    ["STU001", "John Doe", "S1A", 78, 82, 91, 91],
    ["STU002", "Jane Mary", "S1A", 85, 79, 87, 87],
    ["STU003", "Alan Smith", "S1A", 90, 88, 95, 95],
]

TEMPLATE_SHEET_NAME = "Student Results"
TEMPLATE_FILENAME = "Student_Results_Template.xlsx"


def read_rows(content: bytes) -> List[Dict[str, Any]]:
    """첫 번째 시트를 읽어 헤더 → 값 dict 목록으로 반환 (빈 셀은 None, 빈 행은 제외)"""
    try:
        df = pd.read_excel(io.BytesIO(content), sheet_name=0, dtype=object)
    except Exception as exc:
        logger.warning("spreadsheet parse failed: %s", exc)
        raise FileRejectedError("Unable to read spreadsheet") from exc

    df = df.dropna(how="all")
    df.columns = [str(c).strip() for c in df.columns]
    df = df.astype(object).where(pd.notna(df), None)
    return df.to_dict(orient="records")


def build_template() -> bytes:
    buffer = io.BytesIO()
    df = pd.DataFrame(TEMPLATE_ROWS, columns=TEMPLATE_COLUMNS)
    df.to_excel(buffer, sheet_name=TEMPLATE_SHEET_NAME, index=False, engine="openpyxl")
    return buffer.getvalue()
