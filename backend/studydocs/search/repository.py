"""
Read access to the primary store for the indexing pipeline.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..models.document import Document, DocumentStatus
from .snapshot import DocumentSnapshot


def _with_associations(stmt):
    # Snapshots are built outside the session, so every association used by
    # the mapper is loaded up front
    return stmt.options(
        selectinload(Document.author),
        selectinload(Document.folder),
        selectinload(Document.tags),
        selectinload(Document.subjects),
    )


class DocumentRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_snapshot(self, document_id: int) -> Optional[DocumentSnapshot]:
        """Latest state of a document, or None if the row does not exist."""
        stmt = _with_associations(select(Document).where(Document.id == document_id))
        document = self.db.execute(stmt).scalar_one_or_none()
        if document is None:
            return None
        return DocumentSnapshot.from_model(document)

    def find_published_page(self, page: int, size: int) -> List[DocumentSnapshot]:
        """One page of published, non-deleted documents in id order."""
        stmt = _with_associations(
            select(Document)
            .where(Document.status == DocumentStatus.PUBLISHED)
            .where(Document.deleted_at.is_(None))
            .order_by(Document.id)
            .offset(page * size)
            .limit(size)
        )
        return [DocumentSnapshot.from_model(d) for d in self.db.execute(stmt).scalars().all()]

    def find_published_by_author(self, user_id: int, page: int, size: int) -> List[DocumentSnapshot]:
        stmt = _with_associations(
            select(Document)
            .where(Document.user_id == user_id)
            .where(Document.status == DocumentStatus.PUBLISHED)
            .where(Document.deleted_at.is_(None))
            .order_by(Document.id)
            .offset(page * size)
            .limit(size)
        )
        return [DocumentSnapshot.from_model(d) for d in self.db.execute(stmt).scalars().all()]
