from typing import Optional, Annotated
from fastapi import Header
from config.settings import settings

# 인증은 앞단(프록시/SSO)에서 처리하고, 사용자 이름만 헤더로 전달받음
UserHeader = Annotated[Optional[str], Header(alias="X-User-Name")]

def get_current_user(x_user_name: UserHeader = None) -> str:
    # 헤더가 없거나 비어 있으면 기본 검토자 이름 사용
    if x_user_name and x_user_name.strip():
        return x_user_name.strip()
    return settings.DEFAULT_REVIEWER
