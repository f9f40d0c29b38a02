from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from schemas.grades import GradeCreate, GradeRecord
from schemas.report_cards import ReportCard, ReportCardCreate
from schemas.uploads import Upload, UploadCreate


class GradeStore(ABC):
    """업로드 / 성적 / 성적표 저장소 공통 인터페이스 (구현체는 스키마 객체만 반환)"""

    # ---- uploads ----
    @abstractmethod
    def get_upload(self, upload_id: int) -> Optional[Upload]: ...
    @abstractmethod
    def list_uploads(self) -> List[Upload]: ...
    @abstractmethod
    def create_upload(self, data: UploadCreate) -> Upload: ...
    @abstractmethod
    def update_upload(self, upload_id: int, **fields: Any) -> Optional[Upload]: ...
    @abstractmethod
    def delete_upload(self, upload_id: int) -> bool:
        """업로드와 그 성적 기록 삭제 (저장 도중 실패한 업로드 정리용)"""

    # ---- grades ----
    @abstractmethod
    def get_grades_by_upload(self, upload_id: int) -> List[GradeRecord]: ...
    @abstractmethod
    def create_grades(self, grades: Sequence[GradeCreate]) -> List[GradeRecord]: ...
    @abstractmethod
    def update_grades(self, grade_ids: Sequence[int], **fields: Any) -> List[GradeRecord]:
        """여러 성적 기록을 한 번에 수정 (전부 반영되거나 전부 실패)"""

    # ---- report cards ----
    @abstractmethod
    def list_report_cards(self) -> List[ReportCard]: ...
    @abstractmethod
    def create_report_card(self, data: ReportCardCreate) -> ReportCard: ...
