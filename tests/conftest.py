import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session
from sqlmodel import SQLModel
from sqlmodel import create_engine

from farmbooks.db import models  # noqa: F401
from farmbooks.main import app
from farmbooks.web.routers.bills import get_db_session
from farmbooks.web.routers.bills import get_text_extractor

SAMPLE_BILL_TEXT = """Synergy
Account Number: 291 431 120
Date of issue 13 Mar 2018
Total amount due $245.60
Reading period: 10 Jan 2018 - 9 Mar 2018
Your average daily usage: 4.6207 units
Usage summary
Meter Previous Current Units
Anytime usage876 1604 728.0000
This bill: 268
"""


def decode_text(data: bytes) -> str:
    """Stand-in for PDF text extraction: the 'PDF' is the text itself."""
    return data.decode("utf-8")


def build_pdf_without_pages() -> bytes:
    """A PDF with a valid xref table whose catalog has no /Pages entry."""
    body = b"%PDF-1.4\n"
    catalog_offset = len(body)
    body += b"1 0 obj\n<< /Type /Catalog >>\nendobj\n"
    xref_offset = len(body)
    body += b"xref\n0 2\n0000000000 65535 f \n%010d 00000 n \n" % catalog_offset
    body += b"trailer\n<< /Size 2 /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % xref_offset
    return body


@pytest.fixture
def bill_text() -> str:
    return SAMPLE_BILL_TEXT


@pytest.fixture
def pdf_without_pages() -> bytes:
    return build_pdf_without_pages()


@pytest.fixture
def extract_text():
    return decode_text


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def _session_override():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = _session_override
    app.dependency_overrides[get_text_extractor] = lambda: decode_text
    yield TestClient(app)
    app.dependency_overrides.clear()
