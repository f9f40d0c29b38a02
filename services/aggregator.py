from typing import Any, Mapping, Optional, Sequence

from schemas.dashboard import DashboardStats
from schemas.grades import ValidationResult
from schemas.report_cards import ReportCard
from schemas.uploads import Upload, UploadCounts
from services.row_extractor import extract_identity


# ==========================================================
# [업로드 단위 집계]
# ==========================================================

def compute_upload_counts(
    rows: Sequence[Mapping[str, Any]],
    result: ValidationResult,
    aliases: Optional[Mapping[str, Sequence[str]]] = None,
) -> UploadCounts:
    """
    - total_count: 원본 행에 학번이 한 번이라도 나온 학생 수 (모든 과목이 오류여도 포함)
    - valid_count: 검증 통과 기록이 하나라도 있는 학생 수
    - error_count: 오류 항목 수 (과목 단위라 한 학생이 여러 개 낼 수 있음)
    매 검증마다 처음부터 다시 계산한다.
    """
    seen = {extract_identity(row, aliases=aliases).student_id for row in rows}
    seen.discard(None)
    valid = {g.student_id for g in result.validated_grades if g.student_id}

    return UploadCounts(
        total_count=len(seen),
        valid_count=len(valid),
        error_count=len(result.errors),
    )


# ==========================================================
# [대시보드 집계]
# ==========================================================

def compute_dashboard_stats(uploads: Sequence[Upload], report_cards: Sequence[ReportCard]) -> DashboardStats:
    total = len(uploads)
    pending = sum(1 for u in uploads if u.status == "pending")
    approved = sum(1 for u in uploads if u.status == "approved")
    # 소수 첫째 자리 반올림 (0.05 는 올림)
    success_rate = int(approved * 1000 / total + 0.5) / 10 if total else 0.0

    return DashboardStats(
        total_uploads=total,
        pending_approval=pending,
        reports_generated=len(report_cards),
        success_rate=success_rate,
    )
