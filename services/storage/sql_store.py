import logging
from typing import Any, List, Optional, Sequence

from pydantic import BaseModel
from sqlalchemy.orm import Session

from models.grades import Grade as GradeModel
from models.report_cards import ReportCard as ReportCardModel
from models.uploads import Upload as UploadModel
from schemas.grades import GradeCreate, GradeRecord
from schemas.report_cards import ReportCard, ReportCardCreate
from schemas.uploads import Upload, UploadCreate
from services.storage.base import GradeStore
from utils.timeutil import utcnow

logger = logging.getLogger(__name__)


def _column_value(value: Any) -> Any:
    # JSON 컬럼에는 pydantic 모델 대신 dict 로 저장
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


class SqlGradeStore(GradeStore):
    """SQLAlchemy 세션 기반 저장소 (sqlite / MySQL)"""

    def __init__(self, db: Session):
        self.db = db

    def _commit(self):
        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("DB commit 실패")
            raise

    # ==========================================================
    # uploads
    # ==========================================================
    def get_upload(self, upload_id: int) -> Optional[Upload]:
        upload = self.db.get(UploadModel, upload_id)
        return Upload.model_validate(upload) if upload else None

    def list_uploads(self) -> List[Upload]:
        records = self.db.query(UploadModel).order_by(UploadModel.uploaded_at.desc(), UploadModel.id.desc()).all()
        return [Upload.model_validate(r) for r in records]

    def create_upload(self, data: UploadCreate) -> Upload:
        db_upload = UploadModel(**data.model_dump(), uploaded_at=utcnow())
        self.db.add(db_upload)
        self._commit()
        self.db.refresh(db_upload)
        return Upload.model_validate(db_upload)

    def update_upload(self, upload_id: int, **fields: Any) -> Optional[Upload]:
        upload = self.db.get(UploadModel, upload_id)
        if upload is None:
            return None
        for key, value in fields.items():
            setattr(upload, key, _column_value(value))
        self._commit()
        self.db.refresh(upload)
        return Upload.model_validate(upload)

    def delete_upload(self, upload_id: int) -> bool:
        upload = self.db.get(UploadModel, upload_id)
        if upload is None:
            return False
        self.db.query(GradeModel).filter(GradeModel.upload_id == upload_id).delete(synchronize_session=False)
        self.db.delete(upload)
        self._commit()
        return True

    # ==========================================================
    # grades
    # ==========================================================
    def get_grades_by_upload(self, upload_id: int) -> List[GradeRecord]:
        records = (
            self.db.query(GradeModel)
            .filter(GradeModel.upload_id == upload_id)
            .order_by(GradeModel.id)
            .all()
        )
        return [GradeRecord.model_validate(r) for r in records]

    def create_grades(self, grades: Sequence[GradeCreate]) -> List[GradeRecord]:
        now = utcnow()
        db_grades = [GradeModel(**g.model_dump(), created_at=now) for g in grades]
        self.db.add_all(db_grades)
        self._commit()
        for g in db_grades:
            self.db.refresh(g)
        return [GradeRecord.model_validate(g) for g in db_grades]

    def update_grades(self, grade_ids: Sequence[int], **fields: Any) -> List[GradeRecord]:
        records = self.db.query(GradeModel).filter(GradeModel.id.in_(list(grade_ids))).order_by(GradeModel.id).all()
        for record in records:
            for key, value in fields.items():
                setattr(record, key, value)
        self._commit()
        for record in records:
            self.db.refresh(record)
        return [GradeRecord.model_validate(r) for r in records]

    # ==========================================================
    # report cards
    # ==========================================================
    def list_report_cards(self) -> List[ReportCard]:
        records = (
            self.db.query(ReportCardModel)
            .order_by(ReportCardModel.generated_at.desc(), ReportCardModel.id.desc())
            .all()
        )
        return [ReportCard.model_validate(r) for r in records]

    def create_report_card(self, data: ReportCardCreate) -> ReportCard:
        db_card = ReportCardModel(**data.model_dump(), generated_at=utcnow())
        self.db.add(db_card)
        self._commit()
        self.db.refresh(db_card)
        return ReportCard.model_validate(db_card)
