import io

import pandas as pd
import pytest

from services.errors import FileRejectedError
from services.spreadsheet import TEMPLATE_COLUMNS, TEMPLATE_SHEET_NAME, build_template, read_rows
from services.validator import validate_rows


def test_template_layout():
    content = build_template()
    df = pd.read_excel(io.BytesIO(content), sheet_name=TEMPLATE_SHEET_NAME)

    assert list(df.columns) == ["Student ID", "Name", "Class", "Mathematics", "English", "Social Studies", "Science"]
    assert list(df.columns) == TEMPLATE_COLUMNS
    assert list(df["Student ID"]) == ["STU001", "STU002", "STU003"]
    assert list(df["Mathematics"]) == [78, 85, 90]


def test_template_validates_cleanly():
    rows = read_rows(build_template())
    result = validate_rows(rows)

    assert len(rows) == 3
    assert result.errors == []
    assert len(result.validated_grades) == 12


def test_read_rows_blank_cells_become_none(xlsx):
    content = xlsx([
        {"Student ID": "STU001", "Name": "John", "Mathematics": 78, "English": None},
        {"Student ID": None, "Name": None, "Mathematics": None, "English": None},
        {"Student ID": "STU002", "Name": "Jane", "Mathematics": None, "English": "B+"},
    ])
    rows = read_rows(content)

    assert len(rows) == 2
    assert rows[0]["English"] is None
    assert rows[1]["Mathematics"] is None
    assert rows[1]["English"] == "B+"
    assert float(rows[0]["Mathematics"]) == 78


@pytest.mark.parametrize("content", [b"", b"not a spreadsheet", b"PK\x03\x04broken"])
def test_unreadable_content_is_rejected(content):
    with pytest.raises(FileRejectedError):
        read_rows(content)
