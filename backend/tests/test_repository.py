from decimal import Decimal

from studydocs.models.document import DocumentStatus
from studydocs.search.repository import DocumentRepository


class TestDocumentRepository:
    def test_published_page_excludes_other_states(self, db_session, seed_documents):
        repository = DocumentRepository(db_session)

        snapshots = repository.find_published_page(0, 50)

        titles = [s.title for s in snapshots]
        assert titles == ["Giải tích 1", "Đại số tuyến tính", "Xác suất thống kê"]
        assert all(s.status == DocumentStatus.PUBLISHED for s in snapshots)

    def test_pages_ordered_by_id(self, db_session, seed_documents):
        repository = DocumentRepository(db_session)

        first = repository.find_published_page(0, 2)
        second = repository.find_published_page(1, 2)
        third = repository.find_published_page(2, 2)

        assert len(first) == 2
        assert len(second) == 1
        assert third == []
        assert first[0].id < first[1].id < second[0].id

    def test_snapshot_carries_associations(self, db_session, seed_documents):
        document = seed_documents["documents"][0]
        snapshot = DocumentRepository(db_session).get_snapshot(document.id)

        assert snapshot.author.username == "lan.nguyen"
        assert snapshot.author.full_name == "Nguyễn Lan"
        assert snapshot.folder.name == "Toán cao cấp"
        assert sorted(snapshot.tags) == ["calculus", "exam"]
        assert [s.name for s in snapshot.subjects] == ["Mathematics"]
        assert snapshot.rating_average == Decimal("4.25")
        assert snapshot.language == "vi"
        assert snapshot.is_searchable

    def test_snapshot_without_associations(self, db_session, seed_documents):
        document = seed_documents["documents"][2]
        snapshot = DocumentRepository(db_session).get_snapshot(document.id)

        assert snapshot.folder is None
        assert snapshot.tags == []
        assert snapshot.subjects == []
        assert snapshot.rating_average is None

    def test_missing_document(self, db_session, seed_documents):
        assert DocumentRepository(db_session).get_snapshot(9999) is None

    def test_soft_deleted_snapshot_not_searchable(self, db_session, seed_documents):
        document = seed_documents["documents"][5]
        snapshot = DocumentRepository(db_session).get_snapshot(document.id)
        assert snapshot.deleted_at is not None
        assert not snapshot.is_searchable

    def test_by_author(self, db_session, seed_documents):
        minh = seed_documents["authors"]["minh"]
        snapshots = DocumentRepository(db_session).find_published_by_author(minh.id, 0, 50)
        assert [s.title for s in snapshots] == ["Xác suất thống kê"]
