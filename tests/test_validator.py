from services.validator import validate_rows


def test_valid_row_yields_one_record_per_subject():
    rows = [{"Student ID": "STU001", "Name": "John Doe", "Class": "S1A", "Mathematics": 78, "English": 82}]
    result = validate_rows(rows)

    assert result.errors == []
    by_subject = {g.subject: g for g in result.validated_grades}
    assert set(by_subject) == {"Mathematics", "English"}
    assert (by_subject["Mathematics"].grade, by_subject["Mathematics"].gpa) == ("C+", "2.0")
    assert (by_subject["English"].grade, by_subject["English"].gpa) == ("B", "2.7")
    assert by_subject["Mathematics"].numeric_grade == "78"
    assert by_subject["English"].class_label == "S1A"
    assert by_subject["English"].term == "Q1"


def test_missing_student_id_fails_even_with_valid_grade():
    result = validate_rows([{"Student ID": "", "Name": "Jane", "Mathematics": 90}])

    assert result.validated_grades == []
    assert len(result.errors) == 1
    error = result.errors[0]
    assert error.subject == "Mathematics"
    assert error.row == 1
    assert "Missing Student ID" in error.errors
    assert error.data.grade == "A-"


def test_out_of_range_score_is_invalid_grade():
    result = validate_rows([{"Student ID": "STU002", "Name": "Ann", "Science": 105}])

    assert result.validated_grades == []
    assert len(result.errors) == 1
    error = result.errors[0]
    assert error.subject == "Science"
    assert error.errors == ["Invalid Science grade: 105"]
    assert error.data.grade == ""
    assert error.data.gpa == "0.0"


def test_bad_subject_does_not_discard_the_rest_of_the_row():
    row = {"Student ID": "STU003", "Name": "Kim", "Mathematics": 91, "English": "B+",
           "Science": "??", "History": 55}
    result = validate_rows([row])

    assert sorted(g.subject for g in result.validated_grades) == ["English", "History", "Mathematics"]
    assert [e.subject for e in result.errors] == ["Science"]
    english = next(g for g in result.validated_grades if g.subject == "English")
    assert english.numeric_grade == "B+"
    assert english.gpa == "3.0"


def test_all_violations_collected_for_one_subject():
    result = validate_rows([{"Mathematics": "Z"}])
    assert result.errors[0].errors == [
        "Missing Student ID", "Missing Student Name", "Invalid Mathematics grade: Z",
    ]


def test_row_without_subject_cells_is_skipped():
    rows = [
        {"Student ID": "STU004", "Name": "Lee", "Mathematics": "", "English": None},
        {"Student ID": "STU005", "Name": "Park", "Art": 99},
    ]
    result = validate_rows(rows)
    assert result.validated_grades == []
    assert result.errors == []


def test_each_subject_lands_in_exactly_one_bucket():
    rows = [
        {"Student ID": "A1", "Name": "One", "Mathematics": 80, "English": 120, "Science": ""},
        {"Student ID": "", "Name": "Two", "Mathematics": "C", "Physics": 66},
        {"Student ID": "A3", "Name": "Three", "Chemistry": "A", "Biology": "x"},
    ]
    result = validate_rows(rows)

    validated = [(g.student_id, g.subject) for g in result.validated_grades]
    failed = [(e.row, e.subject) for e in result.errors]
    assert len(validated) + len(failed) == 6
    assert ("A1", "Mathematics") in validated and (1, "English") in failed
    assert (2, "Mathematics") in failed and (2, "Physics") in failed
    assert ("A3", "Chemistry") in validated and (3, "Biology") in failed
    assert not any(s == "Science" for _, s in validated + failed)


def test_row_numbers_are_one_based():
    rows = [{"Student ID": "A", "Name": "a", "Mathematics": 70}] * 2 + [{"Name": "c", "Mathematics": 70}]
    result = validate_rows(rows)
    assert [e.row for e in result.errors] == [3]


def test_huge_numeric_cell_becomes_error_entry():
    result = validate_rows([{"Student ID": "S1", "Name": "A", "Mathematics": 10**400, "English": 88}])

    assert [g.subject for g in result.validated_grades] == ["English"]
    assert len(result.errors) == 1
    assert result.errors[0].subject == "Mathematics"
    assert result.errors[0].errors[0].startswith("Invalid Mathematics grade: 1000")
