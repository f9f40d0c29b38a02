from datetime import datetime, timezone


def utcnow() -> datetime:
    """DB 저장용 UTC 시각 (tz 정보 없는 naive datetime)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
