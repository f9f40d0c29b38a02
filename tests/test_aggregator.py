from schemas.report_cards import ReportCard
from schemas.uploads import Upload
from services.aggregator import compute_dashboard_stats, compute_upload_counts
from services.validator import validate_rows


def _upload(upload_id, status):
    return Upload(
        id=upload_id, filename=f"{upload_id}.xlsx", original_name=f"{upload_id}.xlsx",
        file_size=10, mime_type="x", uploaded_by="admin", status=status,
    )


def test_upload_counts_for_mixed_class():
    rows = []
    for i in range(7):
        rows.append({"Student ID": f"S{i}", "Name": f"Valid {i}", "Mathematics": 80, "English": 70})
    for i in range(7, 10):
        rows.append({"Student ID": f"S{i}", "Name": f"Broken {i}", "Mathematics": 150, "English": "?"})

    result = validate_rows(rows)
    counts = compute_upload_counts(rows, result)

    assert counts.total_count == 10
    assert counts.valid_count == 7
    assert counts.error_count >= 3
    assert counts.error_count == 6


def test_student_counted_once_across_rows():
    rows = [
        {"Student ID": "S1", "Name": "A", "Mathematics": 90},
        {"Student ID": "S1", "Name": "A", "English": 85},
        {"Student ID": "S2", "Name": "B"},
        {"Name": "No id", "Science": 80},
    ]
    counts = compute_upload_counts(rows, validate_rows(rows))

    # S2 는 과목이 없어도 원본 학생 수에 포함
    assert counts.total_count == 2
    assert counts.valid_count == 1
    assert counts.error_count == 1
    assert counts.valid_count <= counts.total_count


def test_empty_upload_counts():
    counts = compute_upload_counts([], validate_rows([]))
    assert (counts.total_count, counts.valid_count, counts.error_count) == (0, 0, 0)


def test_dashboard_stats():
    uploads = [_upload(1, "approved"), _upload(2, "approved"), _upload(3, "approved"), _upload(4, "pending")]
    stats = compute_dashboard_stats(uploads, [])

    assert stats.total_uploads == 4
    assert stats.pending_approval == 1
    assert stats.reports_generated == 0
    assert stats.success_rate == 75.0


def test_dashboard_stats_without_uploads():
    stats = compute_dashboard_stats([], [])
    assert stats.success_rate == 0
    assert stats.total_uploads == 0


def test_dashboard_success_rate_rounds_to_one_decimal():
    uploads = [_upload(1, "approved"), _upload(2, "rejected"), _upload(3, "pending")]
    card = ReportCard(
        id=1, student_id="S1", student_name="A", grade="S1", class_label="S1A",
        term="Q1", academic_year="2023-2024", upload_id=1, generated_by="admin",
    )
    stats = compute_dashboard_stats(uploads, [card])
    assert stats.success_rate == 33.3
    assert stats.reports_generated == 1


def test_row_without_subject_cells_counts_but_yields_nothing():
    rows = [
        {"Student ID": "STU001", "Name": "John", "Mathematics": 78},
        {"Student ID": "STU002", "Name": "Ann", "Mathematics": None, "English": "  "},
    ]
    result = validate_rows(rows)
    counts = compute_upload_counts(rows, result)

    assert result.errors == []
    assert {g.student_id for g in result.validated_grades} == {"STU001"}
    assert (counts.total_count, counts.valid_count, counts.error_count) == (2, 1, 0)
