import logging
from contextlib import contextmanager

from .celery_app import celery_app, INDEX_DOCUMENT_TASK, DELETE_DOCUMENT_TASK
from ..database import SessionLocal
from ..search.indexing import IndexOutcome
from ..search.service import build_indexing_pipeline

logger = logging.getLogger(__name__)

# Retries with exponential backoff: 30s, 60s, 120s
MAX_RETRIES = 3
RETRY_BASE_DELAY = 30


@contextmanager
def get_task_db_session():
    """Create a new database session for Celery tasks."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _retry_failed(task, document_id: int, action: str):
    retry_count = task.request.retries
    if retry_count >= MAX_RETRIES:
        logger.error(f"Giving up on {action} of document {document_id} after {retry_count} retries")
        return IndexOutcome.FAILED.value
    countdown = RETRY_BASE_DELAY * (2 ** retry_count)
    logger.info(f"Retrying {action} of document {document_id} in {countdown} seconds (attempt {retry_count + 1}/{MAX_RETRIES})")
    raise task.retry(countdown=countdown, max_retries=MAX_RETRIES)


@celery_app.task(bind=True, name=INDEX_DOCUMENT_TASK)
def index_document_task(self, document_id: int) -> str:
    """
    Re-evaluate one document against the index.

    The latest primary-store state is loaded here rather than passed in, so a
    task that runs late still writes current data.
    """
    logger.info(f"Indexing task {self.request.id} started for document {document_id}")

    with get_task_db_session() as db:
        pipeline = build_indexing_pipeline(db)
        outcome = pipeline.reindex_document(document_id)

    if outcome == IndexOutcome.FAILED:
        return _retry_failed(self, document_id, "indexing")

    logger.info(f"Indexing task {self.request.id} finished for document {document_id}: {outcome.value}")
    return outcome.value


@celery_app.task(bind=True, name=DELETE_DOCUMENT_TASK)
def delete_document_task(self, document_id: int) -> str:
    """Remove one record from the index."""
    pipeline = build_indexing_pipeline()
    outcome = pipeline.delete_from_index(document_id)

    if outcome == IndexOutcome.FAILED:
        return _retry_failed(self, document_id, "deletion")

    logger.info(f"Delete task {self.request.id} finished for document {document_id}: {outcome.value}")
    return outcome.value
