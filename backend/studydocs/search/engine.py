"""
Query engine: runs search, autocomplete and similarity requests against the
search index and shapes the hits for the API.
"""

import logging
import time
from typing import Any, Dict, List, Optional

from ..core.exceptions import SearchExecutionError
from ..schemas.search import (
    IndexStats,
    SearchAggregations,
    SearchRequest,
    SearchResponse,
    SearchResult,
)
from . import queries
from .store import SearchIndexStore

logger = logging.getLogger(__name__)

SIMILAR_DEFAULT_LIMIT = 10


def hit_to_result(hit: Dict[str, Any]) -> SearchResult:
    """Convert a raw search hit into a SearchResult."""
    source = hit.get("_source") or {}
    highlights = {
        field: list(fragments)
        for field, fragments in (hit.get("highlight") or {}).items()
        if fragments
    }
    return SearchResult(
        document_id=int(source.get("id", hit.get("_id"))),
        title=source.get("title") or "",
        description=source.get("description"),
        score=hit.get("_score"),
        highlights=highlights,
        author_id=source.get("authorId"),
        author_name=source.get("authorName"),
        author_username=source.get("authorUsername"),
        file_name=source.get("fileName"),
        file_type=source.get("fileType"),
        file_size=source.get("fileSize"),
        thumbnail_url=source.get("thumbnailUrl"),
        tags=source.get("tags") or [],
        subject_ids=source.get("subjectIds") or [],
        subject_names=source.get("subjectNames") or [],
        folder_id=source.get("folderId"),
        folder_name=source.get("folderName"),
        status=source.get("status"),
        visibility=source.get("visibility"),
        is_featured=bool(source.get("isFeatured", False)),
        language=source.get("language"),
        view_count=source.get("viewCount") or 0,
        download_count=source.get("downloadCount") or 0,
        favourite_count=source.get("favouriteCount") or 0,
        rating_average=source.get("ratingAverage"),
        rating_count=source.get("ratingCount") or 0,
        created_at=source.get("createdAt"),
        updated_at=source.get("updatedAt"),
    )


def _bucket_counts(aggregations: Dict[str, Any], name: str) -> Dict[str, int]:
    buckets = (aggregations.get(name) or {}).get("buckets") or []
    return {str(bucket["key"]): int(bucket["doc_count"]) for bucket in buckets}


def parse_aggregations(aggregations: Optional[Dict[str, Any]]) -> Optional[SearchAggregations]:
    if not aggregations:
        return None
    return SearchAggregations(
        tag_counts=_bucket_counts(aggregations, "tags"),
        subject_counts=_bucket_counts(aggregations, "subjects"),
        file_type_counts=_bucket_counts(aggregations, "fileTypes"),
        author_counts=_bucket_counts(aggregations, "authors"),
    )


class QueryEngine:
    """
    Read side of the search subsystem.

    Every backend failure surfaces as SearchExecutionError; an error is never
    reported as an empty result page.
    """

    def __init__(self, store: SearchIndexStore, enabled: bool = True):
        self.store = store
        self.enabled = enabled

    def search(self, request: SearchRequest) -> SearchResponse:
        started = time.perf_counter()
        body = queries.build_search_body(request)

        try:
            response = self.store.search(body)
        except Exception as e:
            logger.error(f"Search failed for query '{request.query}': {e}")
            raise SearchExecutionError(f"Search failed: {e}") from e

        hits = response.get("hits") or {}
        total_hits = queries.parse_total_hits(hits)
        results = [hit_to_result(hit) for hit in hits.get("hits") or []]
        elapsed_ms = int((time.perf_counter() - started) * 1000)

        logger.debug(f"Search '{request.query}' returned {total_hits} hits in {elapsed_ms}ms")

        return SearchResponse(
            results=results,
            total_hits=total_hits,
            page=request.page,
            size=request.size,
            total_pages=queries.total_pages(total_hits, request.size),
            query=request.query,
            search_time_ms=elapsed_ms,
            aggregations=parse_aggregations(response.get("aggregations")) if request.include_aggregations else None,
        )

    def autocomplete(self, prefix: Optional[str]) -> List[str]:
        """Distinct title suggestions for a prefix. Blank input makes no backend call."""
        if not prefix or not prefix.strip():
            return []

        body = queries.build_autocomplete_body(prefix.strip())
        try:
            response = self.store.search(body)
        except Exception as e:
            logger.error(f"Autocomplete failed for prefix '{prefix}': {e}")
            raise SearchExecutionError(f"Autocomplete failed: {e}") from e

        suggestions: List[str] = []
        for hit in (response.get("hits") or {}).get("hits") or []:
            title = (hit.get("_source") or {}).get("title")
            if title and title not in suggestions:
                suggestions.append(title)
            if len(suggestions) >= queries.AUTOCOMPLETE_LIMIT:
                break
        return suggestions

    def find_similar(self, document_id: int, limit: int = SIMILAR_DEFAULT_LIMIT) -> List[SearchResult]:
        """Documents similar to an indexed one. Unknown ids yield no results."""
        try:
            if not self.store.exists(document_id):
                logger.info(f"Similarity requested for unindexed document {document_id}")
                return []
            body = queries.build_more_like_this_body(self.store.index_name, document_id, limit)
            response = self.store.search(body)
        except Exception as e:
            logger.error(f"Similarity search failed for document {document_id}: {e}")
            raise SearchExecutionError(f"Similarity search failed: {e}") from e

        results = [hit_to_result(hit) for hit in (response.get("hits") or {}).get("hits") or []]
        return [result for result in results if result.document_id != document_id][:limit]

    def stats(self) -> IndexStats:
        try:
            exists = self.store.index_exists()
            count = self.store.count() if exists else 0
        except Exception as e:
            logger.error(f"Failed to read index stats: {e}")
            raise SearchExecutionError(f"Failed to read index stats: {e}") from e

        return IndexStats(
            index_name=self.store.index_name,
            enabled=self.enabled,
            index_exists=exists,
            document_count=count,
        )


class DisabledQueryEngine:
    """Stand-in used when search is switched off. Every query is empty."""

    enabled = False

    def __init__(self, index_name: str):
        self.index_name = index_name

    def search(self, request: SearchRequest) -> SearchResponse:
        return SearchResponse(
            results=[],
            total_hits=0,
            page=request.page,
            size=request.size,
            total_pages=0,
            query=request.query,
            search_time_ms=0,
            aggregations=SearchAggregations() if request.include_aggregations else None,
        )

    def autocomplete(self, prefix: Optional[str]) -> List[str]:
        return []

    def find_similar(self, document_id: int, limit: int = SIMILAR_DEFAULT_LIMIT) -> List[SearchResult]:
        return []

    def stats(self) -> IndexStats:
        return IndexStats(index_name=self.index_name, enabled=False, index_exists=False, document_count=0)
