"""
Builds the search services from settings.

This is the only place that looks at SEARCH_ENABLED. With search switched
off the Disabled* stand-ins are returned and neither Elasticsearch nor
Celery is touched.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.s3 import get_s3_service
from .dispatch import CeleryTaskDispatcher
from .engine import DisabledQueryEngine, QueryEngine
from .extractor import ContentExtractor
from .indexing import DisabledIndexingPipeline, IndexingPipeline
from .mapper import IndexDocumentMapper
from .repository import DocumentRepository
from .store import SearchIndexStore, create_elasticsearch_client

logger = logging.getLogger(__name__)

_index_store: Optional[SearchIndexStore] = None


def search_enabled() -> bool:
    return settings.SEARCH_ENABLED


def get_index_store() -> SearchIndexStore:
    """Shared store over a single Elasticsearch client."""
    global _index_store
    if _index_store is None:
        _index_store = SearchIndexStore(create_elasticsearch_client(), settings.ELASTICSEARCH_INDEX)
    return _index_store


def build_query_engine():
    if not search_enabled():
        return DisabledQueryEngine(settings.ELASTICSEARCH_INDEX)
    return QueryEngine(get_index_store())


def build_indexing_pipeline(db: Optional[Session] = None):
    """Indexing pipeline bound to a primary-store session."""
    if not search_enabled():
        return DisabledIndexingPipeline()

    extractor = ContentExtractor(get_s3_service(), max_length=settings.SEARCH_CONTENT_LIMIT)
    return IndexingPipeline(
        store=get_index_store(),
        mapper=IndexDocumentMapper(extractor, content_limit=settings.SEARCH_CONTENT_LIMIT),
        repository=DocumentRepository(db) if db is not None else None,
        dispatcher=CeleryTaskDispatcher(),
        page_size=settings.BULK_INDEX_PAGE_SIZE,
    )


def initialize_search_index() -> bool:
    """Create the index at startup. Returns True if search is ready."""
    if not search_enabled():
        logger.info("Search is disabled, skipping index initialization")
        return False
    try:
        created = get_index_store().ensure_index()
    except Exception as e:
        logger.error(f"Failed to initialize search index: {e}")
        return False
    if created:
        logger.info(f"Search index '{settings.ELASTICSEARCH_INDEX}' created")
    return True
