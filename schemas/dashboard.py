from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_uploads: int          # 전체 업로드 수
    pending_approval: int       # 승인 대기 업로드 수
    reports_generated: int      # 발급된 성적표 수
    success_rate: float         # 승인된 업로드 비율(%) 소수 첫째 자리
