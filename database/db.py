from sqlalchemy import create_engine               # SQLAlchemy 엔진 생성 도구
from sqlalchemy.orm import declarative_base, sessionmaker

from config.settings import settings               # ✅ 환경변수 설정 파일 불러오기

# ✅ sqlite 는 요청 스레드가 달라도 같은 연결을 쓸 수 있게 허용
_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

# ✅ 환경변수에서 DB 연결 URL을 불러와 엔진 생성
engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args, pool_pre_ping=True)

# ✅ 세션 팩토리: DB 연결에 사용할 세션 생성기 정의
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# ✅ 모델 정의 시 상속할 Base 클래스 (Declarative 방식 사용)
Base = declarative_base()


def init_db():
    """등록된 모든 테이블 생성 (없을 때만)"""
    # 모델 모듈을 import 해야 Base.metadata 에 테이블이 등록됨
    import models.uploads  # noqa: F401
    import models.grades  # noqa: F401
    import models.report_cards  # noqa: F401

    Base.metadata.create_all(bind=engine)
