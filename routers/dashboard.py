from fastapi import APIRouter, Depends

from dependencies.storage import get_store
from services.aggregator import compute_dashboard_stats
from services.storage.base import GradeStore

router = APIRouter(prefix="/dashboard", tags=["대시보드"])


# ✅ [STATS] 업로드/성적표 요약 지표 (매 요청마다 새로 계산)
@router.get("/stats")
def get_dashboard_stats(store: GradeStore = Depends(get_store)):
    stats = compute_dashboard_stats(store.list_uploads(), store.list_report_cards())
    return {"success": True, "data": stats.model_dump()}
