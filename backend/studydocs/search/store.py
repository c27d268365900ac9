"""
Narrow read/write interface over the Elasticsearch index holding SearchRecords.
"""

import logging
from typing import Any, Dict

from elasticsearch import Elasticsearch, NotFoundError

from ..core.config import settings
from .record import SearchRecord, build_index_definition

logger = logging.getLogger(__name__)


def _body(response) -> Dict[str, Any]:
    # ObjectApiResponse wraps the decoded JSON in .body
    return getattr(response, "body", response)


def create_elasticsearch_client() -> Elasticsearch:
    """Build the Elasticsearch client from settings."""
    client_kwargs = {
        "hosts": [settings.ELASTICSEARCH_URL],
        "request_timeout": settings.ELASTICSEARCH_REQUEST_TIMEOUT,
        "retry_on_timeout": True,
        "max_retries": 2,
    }
    if settings.elasticsearch_basic_auth:
        client_kwargs["basic_auth"] = settings.elasticsearch_basic_auth
    return Elasticsearch(**client_kwargs)


class SearchIndexStore:
    """
    Elasticsearch-backed store for SearchRecords.

    Writes are last-write-wins per document id; the store does no fencing.
    """

    def __init__(self, client: Elasticsearch, index_name: str):
        self.client = client
        self.index_name = index_name

    def ensure_index(self) -> bool:
        """Create the index with the SearchRecord mapping if it does not exist."""
        if self.client.indices.exists(index=self.index_name):
            return False

        definition = build_index_definition(self.index_name)
        self.client.indices.create(
            index=self.index_name,
            settings=definition.get("settings"),
            mappings=definition["mappings"],
        )
        logger.info(f"Created search index '{self.index_name}'")
        return True

    def index_exists(self) -> bool:
        return bool(self.client.indices.exists(index=self.index_name))

    def save(self, record: SearchRecord) -> None:
        """Insert or fully replace the record with the same id."""
        self.client.index(
            index=self.index_name,
            id=str(record.id),
            document=record.to_index_body(),
        )

    def delete(self, document_id: int) -> bool:
        """
        Remove a record. Returns False when it was not indexed.

        A missing record is not an error.
        """
        try:
            self.client.delete(index=self.index_name, id=str(document_id))
            return True
        except NotFoundError:
            return False

    def exists(self, document_id: int) -> bool:
        return bool(self.client.exists(index=self.index_name, id=str(document_id)))

    def search(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Run a search request body against the index."""
        return _body(self.client.search(index=self.index_name, **body))

    def count(self) -> int:
        response = _body(self.client.count(index=self.index_name))
        return int(response["count"])
