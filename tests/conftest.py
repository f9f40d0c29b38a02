"""
Pytest configuration and fixtures.
API tests run against the in-memory store; SQL store tests use a private in-memory sqlite engine.
"""
import io
import os

# settings 가 만들어지기 전에 테스트용 환경 지정
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("SQLITE_PATH", ":memory:")

import pandas as pd
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.settings import XLSX_MIME_TYPE
from database.db import Base
from services.pdf_service import PDFService
from services.storage.memory_store import MemoryGradeStore
from services.storage.sql_store import SqlGradeStore


class FakePDFService(PDFService):
    """HTML 렌더링은 그대로, PDF 변환만 대체 (weasyprint 시스템 라이브러리 불필요)"""

    def _html_to_pdf(self, html_content: str) -> bytes:
        return b"%PDF-1.7 test\n" + html_content.encode("utf-8")


def make_xlsx(rows, columns=None) -> bytes:
    buffer = io.BytesIO()
    pd.DataFrame(rows, columns=columns).to_excel(buffer, index=False, engine="openpyxl")
    return buffer.getvalue()


@pytest.fixture
def xlsx():
    return make_xlsx


@pytest.fixture
def xlsx_mime():
    return XLSX_MIME_TYPE


@pytest.fixture
def memory_store():
    return MemoryGradeStore()


@pytest.fixture
def sql_store():
    import models.grades, models.report_cards, models.uploads  # noqa: F401

    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    try:
        yield SqlGradeStore(session)
    finally:
        session.close()
        engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def pdf_service():
    return FakePDFService()


@pytest.fixture
def client(memory_store, pdf_service):
    from main import app
    from dependencies.storage import get_store
    from routers.pdf_reports import get_pdf_service

    app.dependency_overrides[get_store] = lambda: memory_store
    app.dependency_overrides[get_pdf_service] = lambda: pdf_service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
