from sqlalchemy import Column, Integer, String, DateTime, JSON, func
from sqlalchemy.orm import relationship
from database.db import Base

class Upload(Base):
    __tablename__ = "uploads"  # 업로드된 성적 엑셀 파일 테이블

    id = Column(Integer, primary_key=True, index=True)          # 업로드 고유 ID (Primary Key)
    filename = Column(String(255), nullable=False)              # 저장 파일명 (<epoch-ms>_<원본명>)
    original_name = Column(String(255), nullable=False)         # 사용자가 올린 원본 파일명
    file_size = Column(Integer, nullable=False)                 # 바이트 단위 크기
    mime_type = Column(String(100), nullable=False)             # MIME 타입 (xlsx / xls)
    status = Column(String(20), nullable=False, default="pending")  # pending / approved / rejected
    uploaded_by = Column(String(100), nullable=False)           # 업로드한 사용자
    uploaded_at = Column(DateTime, nullable=False, server_default=func.now())
    approved_at = Column(DateTime)                              # 승인/반려 시각
    approved_by = Column(String(100))                           # 승인/반려 처리자

    validation_results = Column(JSON)                           # {validatedGrades, errors} 감사용 원본
    error_count = Column(Integer, default=0)                    # 오류 항목 수 (과목 단위)
    valid_count = Column(Integer, default=0)                    # 유효 기록이 있는 학생 수
    total_count = Column(Integer, default=0)                    # 원본에 등장한 학생 수

    # ✅ 관계 설정: Upload ↔ Grade (1:N)
    grades = relationship("Grade", back_populates="upload")
