"""
Elasticsearch query body builders for document search.

Every function here is pure: it turns request values into the dicts passed
to ``Elasticsearch.search``. Execution lives in QueryEngine.
"""

from typing import Any, Dict, List, Optional

from ..schemas.search import SearchRequest, SortOption, SortOrder
from ..utils.timeutils import to_iso_utc

# Field boosts for ranked text search: title matches outrank description,
# which outrank body content
TEXT_SEARCH_FIELDS = ["title^3", "description^2", "content^1"]
FUZZY_PREFIX_LENGTH = 2

HIGHLIGHT_FIELDS = ["title", "description", "content"]
HIGHLIGHT_PRE_TAG = '<em class="highlight">'
HIGHLIGHT_POST_TAG = "</em>"
HIGHLIGHT_FRAGMENTS = 3
HIGHLIGHT_FRAGMENT_SIZE = 150

AUTOCOMPLETE_FIELD = "title.suggest"
AUTOCOMPLETE_LIMIT = 10

SIMILARITY_FIELDS = ["title", "description", "tags"]
SIMILARITY_MIN_TERM_FREQ = 1
SIMILARITY_MAX_QUERY_TERMS = 12

FACET_SIZE = 20

SORT_FIELDS = {
    SortOption.DATE: "createdAt",
    SortOption.UPDATED: "updatedAt",
    SortOption.RATING: "ratingAverage",
    SortOption.VIEWS: "viewCount",
    SortOption.DOWNLOADS: "downloadCount",
    SortOption.FAVORITES: "favouriteCount",
    SortOption.TITLE: "title.keyword",
}

# Result lists never need the extracted body text
RESULT_SOURCE_EXCLUDES = ["content"]


def build_text_query(query_text: str, fuzzy: bool) -> Dict[str, Any]:
    """Multi-field ranked match over title, description and content."""
    multi_match: Dict[str, Any] = {
        "query": query_text,
        "fields": list(TEXT_SEARCH_FIELDS),
    }
    if fuzzy:
        multi_match["fuzziness"] = "AUTO"
        multi_match["prefix_length"] = FUZZY_PREFIX_LENGTH
    return {"multi_match": multi_match}


def _terms(field: str, values: List[Any]) -> Dict[str, Any]:
    return {"terms": {field: list(values)}}


def _term(field: str, value: Any) -> Dict[str, Any]:
    return {"term": {field: value}}


def build_filters(request: SearchRequest) -> List[Dict[str, Any]]:
    """
    Translate request filters into bool.filter clauses.

    Clauses are ANDed; list-valued filters match when any value matches.
    Empty lists are treated as absent.
    """
    filters: List[Dict[str, Any]] = []

    if request.statuses:
        filters.append(_terms("status", [status.value for status in request.statuses]))

    if request.visibilities:
        filters.append(_terms("visibility", [v.value for v in request.visibilities]))

    if request.author_id is not None:
        filters.append(_term("authorId", request.author_id))

    if request.tags:
        filters.append(_terms("tags", request.tags))

    if request.subject_ids:
        filters.append(_terms("subjectIds", request.subject_ids))

    if request.file_types:
        filters.append(_terms("fileType", request.file_types))

    if request.language:
        filters.append(_term("language", request.language))

    if request.folder_id is not None:
        filters.append(_term("folderId", request.folder_id))

    if request.is_featured is not None:
        filters.append(_term("isFeatured", request.is_featured))

    if request.date_from is not None or request.date_to is not None:
        date_range: Dict[str, Any] = {}
        if request.date_from is not None:
            date_range["gte"] = to_iso_utc(request.date_from)
        if request.date_to is not None:
            date_range["lte"] = to_iso_utc(request.date_to)
        filters.append({"range": {"createdAt": date_range}})

    if request.min_rating is not None:
        filters.append({"range": {"ratingAverage": {"gte": float(request.min_rating)}}})

    return filters


def build_query(request: SearchRequest) -> Dict[str, Any]:
    """Combine the text query and filters into one bool query."""
    bool_query: Dict[str, Any] = {}

    if request.has_query:
        bool_query["must"] = [build_text_query(request.query.strip(), request.fuzzy_search)]
    else:
        bool_query["must"] = [{"match_all": {}}]

    filters = build_filters(request)
    if filters:
        bool_query["filter"] = filters

    return {"bool": bool_query}


def build_sort(sort_by: SortOption, sort_order: SortOrder) -> List[Dict[str, Any]]:
    """
    Sort clause for the requested mode.

    Relevance is always score descending; the requested direction only
    applies to field sorts.
    """
    if sort_by == SortOption.RELEVANCE:
        return [{"_score": {"order": "desc"}}]

    direction = "asc" if sort_order == SortOrder.ASC else "desc"
    return [{SORT_FIELDS[sort_by]: {"order": direction, "missing": "_last"}}]


def build_highlight() -> Dict[str, Any]:
    return {
        "pre_tags": [HIGHLIGHT_PRE_TAG],
        "post_tags": [HIGHLIGHT_POST_TAG],
        "fields": {
            field: {
                "number_of_fragments": HIGHLIGHT_FRAGMENTS,
                "fragment_size": HIGHLIGHT_FRAGMENT_SIZE,
            }
            for field in HIGHLIGHT_FIELDS
        },
    }


def build_aggregations() -> Dict[str, Any]:
    """Facet counts for the search sidebar."""
    return {
        "tags": {"terms": {"field": "tags", "size": FACET_SIZE}},
        "subjects": {"terms": {"field": "subjectNames", "size": FACET_SIZE}},
        "fileTypes": {"terms": {"field": "fileType", "size": FACET_SIZE}},
        "authors": {"terms": {"field": "authorUsername", "size": FACET_SIZE}},
    }


def build_search_body(request: SearchRequest) -> Dict[str, Any]:
    """Full keyword arguments for ``Elasticsearch.search``."""
    body: Dict[str, Any] = {
        "query": build_query(request),
        "sort": build_sort(request.sort_by, request.sort_order),
        "from_": request.page * request.size,
        "size": request.size,
        "track_total_hits": True,
        "source_excludes": list(RESULT_SOURCE_EXCLUDES),
    }
    if request.highlight_results:
        body["highlight"] = build_highlight()
    if request.include_aggregations:
        body["aggs"] = build_aggregations()
    return body


def build_autocomplete_body(prefix: str, limit: int = AUTOCOMPLETE_LIMIT) -> Dict[str, Any]:
    return {
        "query": {"match_phrase_prefix": {AUTOCOMPLETE_FIELD: {"query": prefix}}},
        "size": limit,
        "source_includes": ["title"],
    }


def build_more_like_this_body(index_name: str, document_id: int, limit: int) -> Dict[str, Any]:
    """Similar documents, seeded by the stored record itself."""
    return {
        "query": {
            "more_like_this": {
                "fields": list(SIMILARITY_FIELDS),
                "like": [{"_index": index_name, "_id": str(document_id)}],
                "min_term_freq": SIMILARITY_MIN_TERM_FREQ,
                "min_doc_freq": 1,
                "max_query_terms": SIMILARITY_MAX_QUERY_TERMS,
            }
        },
        "size": limit,
        "source_excludes": list(RESULT_SOURCE_EXCLUDES),
    }


def total_pages(total_hits: int, size: int) -> int:
    if size <= 0:
        return 0
    return (total_hits + size - 1) // size


def parse_total_hits(hits: Dict[str, Any]) -> int:
    total: Optional[Any] = hits.get("total")
    if isinstance(total, dict):
        return int(total.get("value", 0))
    return int(total or 0)
