import threading

from schemas.grades import GradeCandidate, GradeCreate, ValidationErrorEntry, ValidationResult
from schemas.report_cards import ReportCardCreate
from schemas.uploads import UploadCreate


def _upload_data(name="grades.xlsx"):
    return UploadCreate(filename=f"1_{name}", original_name=name, file_size=2048,
                        mime_type="application/vnd.ms-excel", uploaded_by="staff01")


def test_upload_round_trip(store):
    upload = store.create_upload(_upload_data())

    assert upload.id >= 1
    assert upload.status == "pending"
    assert upload.uploaded_at is not None
    assert (upload.total_count, upload.valid_count, upload.error_count) == (0, 0, 0)
    assert store.get_upload(upload.id) == upload
    assert store.get_upload(upload.id + 100) is None


def test_update_upload_stores_validation_results(store):
    upload = store.create_upload(_upload_data())
    candidate = GradeCandidate(student_id="S1", student_name="Ann", subject="Science",
                               grade="", numeric_grade="105", term="Q1", academic_year="2023-2024")
    results = ValidationResult(
        validated_grades=[],
        errors=[ValidationErrorEntry(row=1, errors=["Invalid Science grade: 105"], data=candidate, subject="Science")],
    )

    updated = store.update_upload(upload.id, validation_results=results, error_count=1, total_count=1)

    assert updated.error_count == 1
    assert updated.validation_results.errors[0].data.numeric_grade == "105"
    assert store.get_upload(upload.id).validation_results == results
    assert store.update_upload(9999, status="approved") is None


def test_list_uploads_newest_first(store):
    first = store.create_upload(_upload_data("a.xlsx"))
    second = store.create_upload(_upload_data("b.xlsx"))
    assert [u.id for u in store.list_uploads()] == [second.id, first.id]


def test_grades_belong_to_their_upload(store):
    one = store.create_upload(_upload_data("a.xlsx"))
    two = store.create_upload(_upload_data("b.xlsx"))
    created = store.create_grades([
        GradeCreate(upload_id=one.id, student_id="S1", student_name="Ann", subject="English",
                    grade="A", numeric_grade="94", gpa="3.7", term="Q1", academic_year="2023-2024"),
        GradeCreate(upload_id=two.id, student_id="S9", student_name="Zed", subject="English",
                    grade="F", numeric_grade="F", gpa="0.0", term="Q2", academic_year="2023-2024"),
    ])

    assert len({g.id for g in created}) == 2
    assert all(g.status == "pending" and g.is_valid for g in created)
    assert [g.student_id for g in store.get_grades_by_upload(one.id)] == ["S1"]
    assert [g.student_id for g in store.get_grades_by_upload(two.id)] == ["S9"]


def test_update_grades_changes_only_selected_records(store):
    upload = store.create_upload(_upload_data())
    created = store.create_grades([
        GradeCreate(upload_id=upload.id, student_id="S1", student_name="Ann", subject=subject,
                    grade="B", gpa="2.7", term="Q1", academic_year="2023-2024")
        for subject in ("Mathematics", "English", "Science")
    ])

    updated = store.update_grades([created[0].id, created[2].id], status="rejected", rejection_reason="typo")

    assert [g.id for g in updated] == [created[0].id, created[2].id]
    statuses = {g.subject: g.status for g in store.get_grades_by_upload(upload.id)}
    assert statuses == {"Mathematics": "rejected", "English": "pending", "Science": "rejected"}


def test_returned_objects_are_detached_copies(store):
    upload = store.create_upload(_upload_data())
    upload.status = "approved"
    assert store.get_upload(upload.id).status == "pending"


def test_report_cards(store):
    upload = store.create_upload(_upload_data())
    card = store.create_report_card(ReportCardCreate(
        student_id="S1", student_name="Ann", grade="S1", class_label="S1A",
        term="Q1", academic_year="2023-2024", upload_id=upload.id, generated_by="admin",
    ))

    assert card.id >= 1
    assert card.generated_at is not None
    assert store.list_report_cards() == [card]


def test_delete_upload_removes_its_grades(store):
    keep = store.create_upload(_upload_data("keep.xlsx"))
    drop = store.create_upload(_upload_data("drop.xlsx"))
    for upload in (keep, drop):
        store.create_grades([GradeCreate(upload_id=upload.id, student_id="S1", student_name="A",
                                         subject="Mathematics", grade="A", gpa="3.7", term="Q1", academic_year="2023-2024")])

    assert store.delete_upload(drop.id) is True
    assert store.delete_upload(drop.id) is False
    assert [u.id for u in store.list_uploads()] == [keep.id]
    assert store.get_grades_by_upload(drop.id) == []
    assert len(store.get_grades_by_upload(keep.id)) == 1


def test_memory_store_reads_while_writing(memory_store):
    upload = memory_store.create_upload(_upload_data())
    failures = []
    done = threading.Event()

    def write():
        try:
            for i in range(300):
                memory_store.create_grades([GradeCreate(upload_id=upload.id, student_id=f"S{i}", student_name="A",
                                                        subject="English", grade="B", gpa="2.7", term="Q1", academic_year="2023-2024")])
                memory_store.create_report_card(ReportCardCreate(
                    student_id=f"S{i}", student_name="A", grade="S1", class_label="S1A",
                    term="Q1", academic_year="2023-2024", upload_id=upload.id, generated_by="admin",
                ))
        finally:
            done.set()

    def read():
        try:
            while not done.is_set():
                memory_store.get_grades_by_upload(upload.id)
                memory_store.list_report_cards()
                memory_store.list_uploads()
        except RuntimeError as exc:
            failures.append(exc)

    threads = [threading.Thread(target=write)] + [threading.Thread(target=read) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert failures == []
    assert len(memory_store.get_grades_by_upload(upload.id)) == 300
    assert len(memory_store.list_report_cards()) == 300


def test_report_card_table_columns():
    from models.report_cards import ReportCard as ReportCardModel

    assert set(ReportCardModel.__table__.columns.keys()) == {
        "id", "student_id", "student_name", "grade", "class_label", "term",
        "academic_year", "upload_id", "generated_by", "generated_at",
    }
