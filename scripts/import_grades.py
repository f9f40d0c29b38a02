"""
엑셀 성적 파일을 API 를 거치지 않고 바로 업로드 처리.

사용: python -m scripts.import_grades data/grades.xlsx --uploaded-by staff01
"""
import argparse
import mimetypes
import sys
from pathlib import Path

from config.settings import XLSX_MIME_TYPE, XLS_MIME_TYPE
from database.db import SessionLocal, init_db
from services.errors import PipelineError
from services.storage.sql_store import SqlGradeStore
from services.upload_service import ingest_spreadsheet


def import_grades(path: Path, uploaded_by: str) -> int:
    mime_type = XLS_MIME_TYPE if path.suffix.lower() == ".xls" else XLSX_MIME_TYPE
    mime_type = mimetypes.guess_type(path.name)[0] or mime_type

    init_db()
    db = SessionLocal()
    try:
        result = ingest_spreadsheet(
            SqlGradeStore(db),
            content=path.read_bytes(),
            original_name=path.name,
            mime_type=mime_type,
            uploaded_by=uploaded_by,
        )
    except PipelineError as e:
        print(f"❌ {path.name}: {e.message}")
        return 1
    finally:
        db.close()

    upload = result.upload
    print(f"✅ upload #{upload.id} ({upload.status}) students {upload.valid_count}/{upload.total_count}, "
          f"grades {len(result.grades)}, errors {upload.error_count}")
    for err in result.errors:
        print(f"   row {err.row} [{err.subject}]: {', '.join(err.errors)}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="엑셀 성적 파일 가져오기")
    parser.add_argument("path", type=Path, help="xlsx / xls 파일 경로")
    parser.add_argument("--uploaded-by", default="cli", help="업로드 사용자 이름")
    args = parser.parse_args(argv)

    if not args.path.is_file():
        print(f"❌ 파일을 찾을 수 없습니다: {args.path}")
        return 1
    return import_grades(args.path, args.uploaded_by)


if __name__ == "__main__":
    sys.exit(main())
