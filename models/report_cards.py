from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from database.db import Base

class ReportCard(Base):
    __tablename__ = "report_cards"  # 발급된 성적표(PDF) 메타데이터 테이블

    id = Column(Integer, primary_key=True, index=True)     # 성적표 고유 ID (Primary Key)
    student_id = Column(String(50), nullable=False)        # 학번
    student_name = Column(String(100), nullable=False)     # 학생 이름
    grade = Column(String(50), nullable=False)             # 학년 표기 (예: S1)
    class_label = Column(String(50), nullable=False)       # 반 (예: S1A)
    term = Column(String(20), nullable=False)              # 발급 시점의 학기
    academic_year = Column(String(20), nullable=False)     # 발급 시점의 학년도
    upload_id = Column(Integer, ForeignKey("uploads.id"), nullable=False)  # 원본 업로드
    generated_by = Column(String(100), nullable=False)
    generated_at = Column(DateTime, nullable=False, server_default=func.now())
