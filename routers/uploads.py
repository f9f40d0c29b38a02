from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from config.settings import settings
from dependencies.security import get_current_user
from dependencies.storage import get_store
from schemas.grades import StudentDecision
from services import workflow
from services.errors import FileRejectedError, FileTooLargeError, NotFoundError
from services.storage.base import GradeStore
from services.upload_service import ingest_spreadsheet

router = APIRouter(prefix="/uploads", tags=["업로드 관리"])


def _get_upload_or_404(store: GradeStore, upload_id: int):
    upload = store.get_upload(upload_id)
    if upload is None:
        raise NotFoundError("Upload not found")
    return upload


# ==========================================================
# [1단계] 조회 라우터
# ==========================================================

# ✅ [READ] 전체 업로드 조회 (최신순)
@router.get("")
def read_uploads(store: GradeStore = Depends(get_store)):
    uploads = store.list_uploads()
    return {
        "success": True,
        "data": [u.model_dump(mode="json") for u in uploads],
        "message": "전체 업로드 조회 완료"
    }


# ✅ [READ] 특정 업로드 조회
@router.get("/{upload_id}")
def read_upload(upload_id: int, store: GradeStore = Depends(get_store)):
    upload = _get_upload_or_404(store, upload_id)
    return {"success": True, "data": upload.model_dump(mode="json")}


# ✅ [READ] 업로드의 성적 기록 조회
@router.get("/{upload_id}/grades")
def read_upload_grades(upload_id: int, store: GradeStore = Depends(get_store)):
    _get_upload_or_404(store, upload_id)
    grades = store.get_grades_by_upload(upload_id)
    return {"success": True, "data": [g.model_dump(mode="json") for g in grades]}


# ✅ [READ] 업로드의 학생별 요약 (학생 단위 상태 포함)
@router.get("/{upload_id}/students")
def read_upload_students(upload_id: int, store: GradeStore = Depends(get_store)):
    _get_upload_or_404(store, upload_id)
    summaries = workflow.summarize_students(store.get_grades_by_upload(upload_id))
    return {"success": True, "data": [s.model_dump(mode="json") for s in summaries]}


# ==========================================================
# [2단계] 업로드 처리 라우터
# ==========================================================

# ✅ [CREATE] 엑셀 업로드 → 검증 → 저장
@router.post("", status_code=201)
def create_upload(
    file: Optional[UploadFile] = File(None),
    store: GradeStore = Depends(get_store),
    user: str = Depends(get_current_user),
):
    if file is None:
        raise FileRejectedError("No file uploaded")

    # 본문을 읽기 전에 크기부터 확인
    if file.size is not None and file.size > settings.max_upload_bytes:
        raise FileTooLargeError(f"File exceeds the {settings.MAX_UPLOAD_MB}MB limit")

    content = file.file.read()
    result = ingest_spreadsheet(
        store,
        content=content,
        original_name=file.filename,
        mime_type=file.content_type,
        uploaded_by=user,
    )
    return {
        "success": True,
        "data": result.model_dump(mode="json"),
        "message": f"{result.upload.valid_count}/{result.upload.total_count} students validated, "
                   f"{result.upload.error_count} error(s)"
    }


# ==========================================================
# [3단계] 승인/반려 라우터
# ==========================================================

# ✅ [APPROVE] 업로드 승인
@router.post("/{upload_id}/approve")
def approve_upload(upload_id: int, store: GradeStore = Depends(get_store), user: str = Depends(get_current_user)):
    upload = workflow.approve_upload(store, upload_id, reviewer=user)
    return {"success": True, "data": upload.model_dump(mode="json"), "message": "업로드가 승인되었습니다"}


# ✅ [REJECT] 업로드 반려
@router.post("/{upload_id}/reject")
def reject_upload(upload_id: int, store: GradeStore = Depends(get_store), user: str = Depends(get_current_user)):
    upload = workflow.reject_upload(store, upload_id, reviewer=user)
    return {"success": True, "data": upload.model_dump(mode="json"), "message": "업로드가 반려되었습니다"}


# ✅ [APPROVE] 학생 단위 승인
@router.post("/{upload_id}/students/{student_id}/approve")
def approve_student(
    upload_id: int,
    student_id: str,
    store: GradeStore = Depends(get_store),
    user: str = Depends(get_current_user),
):
    records = workflow.approve_student(store, upload_id, student_id, reviewer=user)
    return {
        "success": True,
        "data": [r.model_dump(mode="json") for r in records],
        "message": f"{student_id} 학생 성적이 승인되었습니다"
    }


# ✅ [REJECT] 학생 단위 반려 (사유 필수)
@router.post("/{upload_id}/students/{student_id}/reject")
def reject_student(
    upload_id: int,
    student_id: str,
    decision: Optional[StudentDecision] = None,
    store: GradeStore = Depends(get_store),
    user: str = Depends(get_current_user),
):
    records = workflow.reject_student(store, upload_id, student_id, reviewer=user, reason=decision.reason if decision else None)
    return {
        "success": True,
        "data": [r.model_dump(mode="json") for r in records],
        "message": f"{student_id} 학생 성적이 반려되었습니다"
    }
