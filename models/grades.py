from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Text, func
from sqlalchemy.orm import relationship
from database.db import Base

class Grade(Base):
    __tablename__ = "grades"  # 학생·과목 단위 성적 기록 테이블

    id = Column(Integer, primary_key=True, index=True)     # 성적 고유 ID (Primary Key)
    upload_id = Column(Integer, ForeignKey("uploads.id"), nullable=False, index=True)  # 소속 업로드
    student_id = Column(String(50), nullable=False, index=True)  # 학번 (예: STU001)
    student_name = Column(String(100), nullable=False)     # 학생 이름
    subject = Column(String(50), nullable=False)           # 과목명
    grade = Column(String(5), nullable=False)              # 성적 등급 (A+ ~ F)
    numeric_grade = Column(String(20))                     # 원점수 (등급으로 입력된 경우 등급 그대로)
    gpa = Column(String(5))                                # 평점 (문자열, 예: "2.7")
    class_label = Column(String(50))                       # 반 (예: S1A)
    term = Column(String(20), nullable=False)              # 학기/분기
    academic_year = Column(String(20), nullable=False)     # 학년도
    is_valid = Column(Boolean, default=True)
    validation_error = Column(Text)
    status = Column(String(20), default="pending")         # pending / approved / rejected
    rejection_reason = Column(Text)                        # 반려 사유 (rejected 일 때 필수)
    reviewed_by = Column(String(100))
    reviewed_at = Column(DateTime)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    # ✅ 관계 설정: Grade ↔ Upload (N:1)
    upload = relationship("Upload", back_populates="grades")
