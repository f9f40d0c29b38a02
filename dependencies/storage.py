from typing import Iterator

from config.settings import settings
from database.db import SessionLocal
from services.storage.base import GradeStore
from services.storage.memory_store import MemoryGradeStore
from services.storage.sql_store import SqlGradeStore

# memory 백엔드는 프로세스당 하나의 저장소를 공유
_memory_store = MemoryGradeStore()


def get_store() -> Iterator[GradeStore]:
    """STORAGE_BACKEND 설정에 맞는 저장소를 요청 단위로 제공"""
    if settings.STORAGE_BACKEND == "memory":
        yield _memory_store
        return

    db = SessionLocal()
    try:
        yield SqlGradeStore(db)
    finally:
        db.close()
