"""
Indexing pipeline: keeps the search index in step with the primary store.

A SearchRecord exists for a document exactly when the document is PUBLISHED
and not soft-deleted. Write-path failures are logged and reported through
IndexOutcome; they never propagate to the code that mutated the document.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from ..core.exceptions import IndexingError
from .mapper import IndexDocumentMapper
from .repository import DocumentRepository
from .snapshot import DocumentSnapshot
from .store import SearchIndexStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50


class IndexOutcome(str, Enum):
    INDEXED = "INDEXED"
    SKIPPED = "SKIPPED"
    DELETED = "DELETED"
    FAILED = "FAILED"


@dataclass
class BulkIndexResult:
    indexed: int = 0
    failed: int = 0

    def record(self, outcome: IndexOutcome) -> None:
        if outcome == IndexOutcome.INDEXED:
            self.indexed += 1
        elif outcome == IndexOutcome.FAILED:
            self.failed += 1


class IndexingPipeline:
    def __init__(
        self,
        store: SearchIndexStore,
        mapper: IndexDocumentMapper,
        repository: Optional[DocumentRepository] = None,
        dispatcher=None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        self.store = store
        self.mapper = mapper
        self.repository = repository
        self.dispatcher = dispatcher
        self.page_size = page_size

    def index_document(self, snapshot: DocumentSnapshot) -> IndexOutcome:
        """Write the record for a searchable document. Other documents are skipped."""
        if not snapshot.is_searchable:
            logger.debug(f"Skipping indexing for non-published document {snapshot.id}")
            return IndexOutcome.SKIPPED

        try:
            record = self.mapper.to_search_record(snapshot)
            self.store.save(record)
        except Exception as e:
            logger.error(f"Failed to index document {snapshot.id}: {e}")
            return IndexOutcome.FAILED

        logger.info(f"Indexed document {snapshot.id}: {snapshot.title}")
        return IndexOutcome.INDEXED

    def update_index(self, snapshot: DocumentSnapshot) -> IndexOutcome:
        """Re-evaluate a document after a change: index it or remove it."""
        if snapshot.is_searchable:
            return self.index_document(snapshot)
        return self.delete_from_index(snapshot.id)

    def delete_from_index(self, document_id: int) -> IndexOutcome:
        """Remove a record. Removing an absent record counts as success."""
        try:
            removed = self.store.delete(document_id)
        except Exception as e:
            logger.error(f"Failed to delete document {document_id} from index: {e}")
            return IndexOutcome.FAILED

        if removed:
            logger.info(f"Deleted document {document_id} from index")
        else:
            logger.debug(f"Document {document_id} was not indexed, nothing to delete")
        return IndexOutcome.DELETED

    def reindex_document(self, document_id: int) -> IndexOutcome:
        """Bring one record in line with the current primary-store row."""
        repository = self._require_repository()
        try:
            snapshot = repository.get_snapshot(document_id)
        except Exception as e:
            logger.error(f"Failed to load document {document_id} for reindexing: {e}")
            return IndexOutcome.FAILED
        if snapshot is None:
            logger.info(f"Document {document_id} no longer exists, removing from index")
            return self.delete_from_index(document_id)
        return self.update_index(snapshot)

    def bulk_index_all(self) -> BulkIndexResult:
        """
        Re-index every published document, one page at a time.

        A failing document is counted and skipped; the run always continues
        to the end of the data.
        """
        repository = self._require_repository()
        logger.info("Starting bulk indexing of all published documents")
        result = self._index_pages(repository.find_published_page)
        logger.info(f"Bulk indexing completed: {result.indexed} indexed, {result.failed} failed")
        return result

    def reindex_by_author(self, user_id: int) -> BulkIndexResult:
        repository = self._require_repository()
        logger.info(f"Re-indexing published documents of user {user_id}")
        result = self._index_pages(
            lambda page, size: repository.find_published_by_author(user_id, page, size)
        )
        logger.info(
            f"Re-indexing for user {user_id} completed: "
            f"{result.indexed} indexed, {result.failed} failed"
        )
        return result

    def _index_pages(self, fetch_page: Callable[[int, int], List[DocumentSnapshot]]) -> BulkIndexResult:
        result = BulkIndexResult()
        page = 0
        while True:
            batch = fetch_page(page, self.page_size)
            if not batch:
                break

            for snapshot in batch:
                result.record(self.index_document(snapshot))

            logger.info(f"Indexed page {page + 1}: {result.indexed} documents so far")
            if len(batch) < self.page_size:
                break
            page += 1
        return result

    def submit_index(self, document_id: int) -> Optional[str]:
        """Queue a background re-evaluation of one document. Returns the task id."""
        return self._submit("index", document_id)

    def submit_delete(self, document_id: int) -> Optional[str]:
        """Queue a background removal of one record. Returns the task id."""
        return self._submit("delete", document_id)

    def _submit(self, action: str, document_id: int) -> Optional[str]:
        if self.dispatcher is None:
            logger.warning(f"No task dispatcher configured, dropping {action} of document {document_id}")
            return None
        try:
            return self.dispatcher.dispatch(action, document_id)
        except Exception as e:
            # The caller already committed its change; the next reindex repairs the record
            logger.error(f"Failed to queue {action} task for document {document_id}: {e}")
            return None

    def _require_repository(self) -> DocumentRepository:
        if self.repository is None:
            raise IndexingError("Indexing pipeline has no document repository")
        return self.repository


class DisabledIndexingPipeline:
    """Stand-in used when search is switched off. Nothing is ever written."""

    def index_document(self, snapshot: DocumentSnapshot) -> IndexOutcome:
        return IndexOutcome.SKIPPED

    def update_index(self, snapshot: DocumentSnapshot) -> IndexOutcome:
        return IndexOutcome.SKIPPED

    def delete_from_index(self, document_id: int) -> IndexOutcome:
        return IndexOutcome.SKIPPED

    def reindex_document(self, document_id: int) -> IndexOutcome:
        return IndexOutcome.SKIPPED

    def bulk_index_all(self) -> BulkIndexResult:
        return BulkIndexResult()

    def reindex_by_author(self, user_id: int) -> BulkIndexResult:
        return BulkIndexResult()

    def submit_index(self, document_id: int) -> Optional[str]:
        return None

    def submit_delete(self, document_id: int) -> Optional[str]:
        return None
