"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import base64
import pytest
import httpx
from typing import Any, Dict, Generator, List, Optional, Tuple
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from nalo_connector.api.main import create_app
from nalo_connector.api.dependencies import get_nalo_client
from nalo_connector.infrastructure.clients.nalo import NaloClient
from nalo_connector.infrastructure.database.models import Base
from nalo_connector.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

API_BASE = "https://nalo.fr/api/v1"

TRANSFER_TEXT = """GENERALI VIE
Paris, le 14 mars 2023
Madame, Monsieur,
Nous accusons réception de votre opération :
Versement complémentaire
Contrat Nalo n° 123456
      Montant
      brut
      versé:
      1 234,56
      Euros
"""

ARBITRAGE_TEXT = """GENERALI VIE
Paris, le 2 avril 2023
Arbitrage
Contrat Nalo n° 123456
"""


class FakeNaloAPI:
    """In-memory stand-in for the Nalo web API, recording every call"""

    def __init__(
        self,
        login_payload: Optional[Dict[str, Any]] = None,
        signed: Optional[Dict[str, bytes]] = None,
        transactional: Optional[Dict[Tuple[str, str], Tuple[str, bytes]]] = None,
        projects_payload: Optional[Dict[str, Any]] = None,
        failing_paths: Tuple[str, ...] = (),
    ):
        self.login_payload = login_payload if login_payload is not None else {"detail": {"token": "abc"}}
        self.signed = signed if signed is not None else {
            "contrat.pdf": b"%PDF-1.4 contrat",
            "mandat.pdf": b"%PDF-1.4 mandat",
        }
        self.transactional = transactional if transactional is not None else {
            ("42", "1001"): ("versement.pdf", TRANSFER_TEXT.encode("utf-8")),
            ("42", "1002"): ("arbitrage.pdf", ARBITRAGE_TEXT.encode("utf-8")),
        }
        self.projects_payload = projects_payload if projects_payload is not None else {
            "detail": [{"id": 42, "name": "Mon projet retraite", "current_value": 123.456}]
        }
        self.failing_paths = failing_paths
        self.calls: List[Tuple[str, str]] = []
        self.requests: List[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> NaloClient:
        return NaloClient(base_url=API_BASE, transport=self.transport)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api/v1")
        self.calls.append((request.method, path))
        self.requests.append(request)

        if path in self.failing_paths:
            return httpx.Response(500, json={"detail": "server error"})

        if path == "/login":
            return httpx.Response(200, json=self.login_payload)

        if path == "/profiles/me/signed-documents/":
            names = list(self.signed)
            return httpx.Response(
                200, json={"detail": [{"id": i, "filename": name} for i, name in enumerate(names, start=1)]}
            )

        if path.startswith("/profiles/me/signed-document-content/"):
            doc_id = int(path.rsplit("/", 1)[1])
            name = list(self.signed)[doc_id - 1]
            return httpx.Response(200, json={"detail": _document(name, self.signed[name])})

        if path == "/account/transactional-pdfs":
            return httpx.Response(
                200,
                json={
                    "detail": [
                        {"id": i, "contract_id": contract_id, "id_operation": operation_id}
                        for i, (contract_id, operation_id) in enumerate(self.transactional, start=1)
                    ]
                },
            )

        if path.startswith("/contract/get-document/"):
            contract_id, operation_id = path.split("/")[-2:]
            name, data = self.transactional[(contract_id, operation_id)]
            return httpx.Response(200, json={"detail": _document(name, data)})

        if path == "/projects/mine/without-details":
            return httpx.Response(200, json=self.projects_payload)

        return httpx.Response(404, json={"detail": "not found"})


def _document(filename: str, data: bytes) -> Dict[str, str]:
    return {"filename": filename, "data": base64.b64encode(data).decode("ascii")}


def read_plain_text(data: bytes) -> str:
    """PDF reader stand-in: test documents are plain UTF-8 text"""
    return data.decode("utf-8", errors="replace")


def _pdf_string(line: str) -> str:
    """Encode one line as a PDF literal string body in WinAnsi (cp1252)"""
    out = []
    for byte in line.encode("cp1252"):
        char = chr(byte)
        if char in "\\()":
            out.append("\\" + char)
        elif 32 <= byte < 127:
            out.append(char)
        else:
            out.append(f"\\{byte:03o}")
    return "".join(out)


def make_pdf(text: str) -> bytes:
    """Build a one-page PDF showing each line of text in Helvetica, 16pt apart"""
    operations = ["BT", "/F1 12 Tf", "16 TL", "72 760 Td"]
    for line in text.splitlines():
        operations.append(f"({_pdf_string(line)}) Tj T*")
    operations.append("ET")
    stream = "\n".join(operations).encode("ascii")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica /Encoding /WinAnsiEncoding >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
    ]

    pdf = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(pdf))
        pdf += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_offset = len(pdf)
    pdf += b"xref\n0 %d\n" % (len(objects) + 1)
    pdf += b"0000000000 65535 f \n"
    for offset in offsets:
        pdf += b"%010d 00000 n \n" % offset
    pdf += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_offset)
    return bytes(pdf)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_nalo() -> FakeNaloAPI:
    return FakeNaloAPI()


@pytest.fixture
def client(db: Session, fake_nalo: FakeNaloAPI) -> TestClient:
    """Create FastAPI test client with test database and fake Nalo API"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_nalo_client] = fake_nalo.client
    return TestClient(app)


@pytest.fixture
def make_fake_nalo():
    """Factory for a fake Nalo API with custom payloads"""
    return FakeNaloAPI


@pytest.fixture
def transfer_text() -> str:
    return TRANSFER_TEXT


@pytest.fixture
def arbitrage_text() -> str:
    return ARBITRAGE_TEXT


@pytest.fixture
def plain_text_reader():
    return read_plain_text


@pytest.fixture
def transfer_pdf() -> bytes:
    return make_pdf(TRANSFER_TEXT)


@pytest.fixture
def arbitrage_pdf() -> bytes:
    return make_pdf(ARBITRAGE_TEXT)
