import itertools
import threading
from typing import Any, Dict, List, Optional, Sequence

from schemas.grades import GradeCreate, GradeRecord
from schemas.report_cards import ReportCard, ReportCardCreate
from schemas.uploads import Upload, UploadCreate
from services.storage.base import GradeStore
from utils.timeutil import utcnow


class MemoryGradeStore(GradeStore):
    """
    프로세스 메모리 저장소 (개발/테스트용).
    ID 카운터는 저장소 인스턴스가 소유하고, 반환값은 항상 복사본이다.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._uploads: Dict[int, Upload] = {}
        self._grades: Dict[int, GradeRecord] = {}
        self._report_cards: Dict[int, ReportCard] = {}
        self._upload_ids = itertools.count(1)
        self._grade_ids = itertools.count(1)
        self._report_card_ids = itertools.count(1)

    # ---- uploads ----
    def get_upload(self, upload_id: int) -> Optional[Upload]:
        with self._lock:
            upload = self._uploads.get(upload_id)
        return upload.model_copy(deep=True) if upload else None

    def list_uploads(self) -> List[Upload]:
        with self._lock:
            uploads = list(self._uploads.values())
        uploads = sorted(uploads, key=lambda u: (u.uploaded_at, u.id), reverse=True)
        return [u.model_copy(deep=True) for u in uploads]

    def create_upload(self, data: UploadCreate) -> Upload:
        with self._lock:
            upload = Upload(**data.model_dump(), id=next(self._upload_ids), uploaded_at=utcnow())
            self._uploads[upload.id] = upload
        return upload.model_copy(deep=True)

    def update_upload(self, upload_id: int, **fields: Any) -> Optional[Upload]:
        with self._lock:
            current = self._uploads.get(upload_id)
            if current is None:
                return None
            # 검증을 다시 거쳐 dict 로 들어온 값도 스키마 타입으로 맞춤
            updated = Upload.model_validate({**current.model_dump(), **fields})
            self._uploads[upload_id] = updated
        return updated.model_copy(deep=True)

    def delete_upload(self, upload_id: int) -> bool:
        with self._lock:
            if self._uploads.pop(upload_id, None) is None:
                return False
            for grade_id in [i for i, g in self._grades.items() if g.upload_id == upload_id]:
                del self._grades[grade_id]
        return True

    # ---- grades ----
    def get_grades_by_upload(self, upload_id: int) -> List[GradeRecord]:
        with self._lock:
            grades = [g for g in self._grades.values() if g.upload_id == upload_id]
        return [g.model_copy() for g in grades]

    def create_grades(self, grades: Sequence[GradeCreate]) -> List[GradeRecord]:
        now = utcnow()
        created = []
        with self._lock:
            for g in grades:
                record = GradeRecord(**g.model_dump(), id=next(self._grade_ids), created_at=now)
                self._grades[record.id] = record
                created.append(record.model_copy())
        return created

    def update_grades(self, grade_ids: Sequence[int], **fields: Any) -> List[GradeRecord]:
        with self._lock:
            # 전부 만들어 둔 뒤 한 번에 교체
            updated = [
                GradeRecord.model_validate({**self._grades[i].model_dump(), **fields})
                for i in sorted(set(grade_ids)) if i in self._grades
            ]
            for record in updated:
                self._grades[record.id] = record
        return [r.model_copy() for r in updated]

    # ---- report cards ----
    def list_report_cards(self) -> List[ReportCard]:
        with self._lock:
            cards = list(self._report_cards.values())
        cards = sorted(cards, key=lambda c: (c.generated_at, c.id), reverse=True)
        return [c.model_copy() for c in cards]

    def create_report_card(self, data: ReportCardCreate) -> ReportCard:
        with self._lock:
            card = ReportCard(**data.model_dump(), id=next(self._report_card_ids), generated_at=utcnow())
            self._report_cards[card.id] = card
        return card.model_copy()
