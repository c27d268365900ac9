import os

# Settings are read at import time, so the environment is prepared first
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test-access-key")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test-secret-key")
os.environ.setdefault("S3_BUCKET_NAME", "studydocs-test")
os.environ.setdefault("ADMIN_API_TOKEN", "test-admin-token")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SEARCH_ENABLED", "true")

import pytest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock, patch
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studydocs.main import app
from studydocs.database import Base, get_db
from studydocs.models import (
    Document, DocumentStatus, DocumentVisibility, Folder, Subject, Tag, User,
)
from studydocs.api.deps import get_indexing_pipeline, get_query_engine
from studydocs.search.snapshot import AuthorRef, DocumentSnapshot, FolderRef, SubjectRef


class FakeIndexStore:
    """In-memory stand-in for SearchIndexStore."""

    def __init__(self, index_name="documents"):
        self.index_name = index_name
        self.records = {}
        self.failing_ids = set()
        self.search_bodies = []
        self.search_response = {"hits": {"total": {"value": 0}, "hits": []}}

    def save(self, record):
        if record.id in self.failing_ids:
            raise ConnectionError("index unavailable")
        self.records[record.id] = record.to_index_body()

    def delete(self, document_id):
        if document_id in self.failing_ids:
            raise ConnectionError("index unavailable")
        return self.records.pop(document_id, None) is not None

    def exists(self, document_id):
        return document_id in self.records

    def search(self, body):
        self.search_bodies.append(body)
        return self.search_response

    def index_exists(self):
        return True

    def count(self):
        return len(self.records)


class FakeTextSource:
    """Returns canned text and remembers what was asked for."""

    def __init__(self, text="Extracted body text"):
        self.text = text
        self.calls = []

    def extract_text(self, object_key, file_name_hint=None):
        self.calls.append((object_key, file_name_hint))
        return self.text


@pytest.fixture
def fake_store():
    return FakeIndexStore()


@pytest.fixture
def fake_text_source():
    return FakeTextSource()


@pytest.fixture
def make_snapshot():
    """Factory for fully populated snapshots; keyword arguments override fields."""
    def _make(**overrides):
        values = dict(
            id=1,
            title="Giải tích 1 - Đề cương ôn tập",
            status=DocumentStatus.PUBLISHED,
            visibility=DocumentVisibility.PUBLIC,
            description="Tổng hợp công thức đạo hàm và tích phân",
            file_name="giai-tich-1.pdf",
            file_type="pdf",
            file_size=204800,
            object_name="documents/1/giai-tich-1.pdf",
            thumbnail_url="https://cdn.example.com/thumbs/1.png",
            is_featured=True,
            language="vi",
            view_count=120,
            download_count=45,
            favourite_count=12,
            rating_average=Decimal("4.50"),
            rating_count=8,
            created_at=datetime(2024, 3, 1, 8, 30),
            updated_at=datetime(2024, 3, 2, 9, 0, tzinfo=timezone.utc),
            author=AuthorRef(id=7, username="lan.nguyen", full_name="Nguyễn Lan"),
            folder=FolderRef(id=3, name="Toán cao cấp"),
            tags=["calculus", "exam"],
            subjects=[SubjectRef(id=11, name="Mathematics")],
        )
        values.update(overrides)
        return DocumentSnapshot(**values)
    return _make


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def seed_documents(db_session):
    """
    Two authors and a mix of document states:
    three published, one draft, one archived, one published but soft-deleted.
    """
    lan = User(username="lan.nguyen", full_name="Nguyễn Lan", email="lan@example.com")
    minh = User(username="minh.tran", full_name=None, email="minh@example.com")
    db_session.add_all([lan, minh])
    db_session.flush()

    folder = Folder(user_id=lan.id, name="Toán cao cấp")
    calculus = Tag(name="calculus", slug="calculus")
    exam = Tag(name="exam", slug="exam")
    maths = Subject(name="Mathematics", slug="mathematics")
    db_session.add_all([folder, calculus, exam, maths])
    db_session.flush()

    def _doc(title, author, status, **kwargs):
        return Document(
            user_id=author.id,
            title=title,
            status=status,
            visibility=kwargs.pop("visibility", DocumentVisibility.PUBLIC),
            **kwargs,
        )

    documents = [
        _doc("Giải tích 1", lan, DocumentStatus.PUBLISHED, folder_id=folder.id,
             object_name="documents/giai-tich.pdf", file_name="giai-tich.pdf", file_type="pdf",
             rating_average=Decimal("4.25"), rating_count=4),
        _doc("Đại số tuyến tính", lan, DocumentStatus.PUBLISHED),
        _doc("Xác suất thống kê", minh, DocumentStatus.PUBLISHED),
        _doc("Bản nháp", lan, DocumentStatus.DRAFT),
        _doc("Lưu trữ", minh, DocumentStatus.ARCHIVED),
        _doc("Đã xoá", lan, DocumentStatus.PUBLISHED, deleted_at=datetime(2024, 5, 1, tzinfo=timezone.utc)),
    ]
    documents[0].tags = [calculus, exam]
    documents[0].subjects = [maths]
    db_session.add_all(documents)
    db_session.commit()

    return {"authors": {"lan": lan, "minh": minh}, "folder": folder, "documents": documents}


@pytest.fixture
def mock_query_engine():
    return MagicMock()


@pytest.fixture
def mock_indexing_pipeline():
    return MagicMock()


@pytest.fixture
def client(mock_query_engine, mock_indexing_pipeline):
    """Test client with the search services replaced by mocks."""
    def override_get_db():
        yield MagicMock()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_query_engine] = lambda: mock_query_engine
    app.dependency_overrides[get_indexing_pipeline] = lambda: mock_indexing_pipeline

    with patch('studydocs.main.initialize_search_index', return_value=True):
        with TestClient(app) as test_client:
            yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"X-Admin-Token": os.environ["ADMIN_API_TOKEN"]}
