import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.settings import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
# 라이브러리 디버그 로그 비활성화
for _name in ("httpcore", "httpx", "weasyprint", "fontTools"):
    logging.getLogger(_name).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

# ✅ 미들웨어 임포트
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ 라우터 임포트
from routers import dashboard, pdf_reports, template, uploads

from database.db import init_db

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS 설정 (프론트엔드 연동)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Report-Count"],
)

# ✅ 요청 지연 측정 미들웨어 (응답 헤더 X-Latency-Ms 추가)
app.add_middleware(TimingMiddleware)

# ✅ 전역 에러 핸들러 등록 (일관된 JSON 에러 포맷)
add_error_handlers(app)

# ✅ /v1 프리픽스 라우터 등록
app.include_router(uploads.router,      prefix="/v1")
app.include_router(pdf_reports.router,  prefix="/v1")
app.include_router(dashboard.router,    prefix="/v1")
app.include_router(template.router,     prefix="/v1")


# ✅ 헬스체크 엔드포인트
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running", "storage": settings.STORAGE_BACKEND}

@app.on_event("startup")
def _init_storage():
    # database 백엔드일 때만 테이블 생성 (실패하면 서버 기동 실패)
    if settings.STORAGE_BACKEND == "database":
        init_db()
        logger.info("database ready: %s", settings.DB_DRIVER)
    else:
        logger.warning("memory storage backend: data is lost on restart")

# ✅ 루트 엔드포인트
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} - 성적 업로드 · 승인 · 성적표 발급"}
