"""
Search API schemas for StudyDocs.

Request and response bodies use camelCase on the wire; Python code uses the
snake_case attribute names.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
import re
from datetime import date, datetime, time
from typing import List, Optional, Dict
from enum import Enum

from ..models.document import DocumentStatus, DocumentVisibility
from ..utils.timeutils import to_utc

DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class SortOption(str, Enum):
    """Available sort modes."""
    RELEVANCE = "RELEVANCE"   # search score
    DATE = "DATE"             # createdAt
    UPDATED = "UPDATED"       # updatedAt
    RATING = "RATING"         # ratingAverage
    VIEWS = "VIEWS"           # viewCount
    DOWNLOADS = "DOWNLOADS"   # downloadCount
    FAVORITES = "FAVORITES"   # favouriteCount
    TITLE = "TITLE"           # title.keyword


class SortOrder(str, Enum):
    """Sort direction options."""
    ASC = "ASC"
    DESC = "DESC"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchRequest(CamelModel):
    """Advanced document search request."""
    query: Optional[str] = Field(default=None, description="Free text searched in title, description and content")

    # Filters
    statuses: Optional[List[DocumentStatus]] = Field(default=None, description="Match any of these statuses")
    visibilities: Optional[List[DocumentVisibility]] = Field(default=None, description="Match any of these visibilities")
    tags: Optional[List[str]] = Field(default=None, description="Match documents carrying any of these tags")
    subject_ids: Optional[List[int]] = Field(default=None, description="Match documents in any of these subjects")
    author_id: Optional[int] = Field(default=None, description="Author user id")
    file_types: Optional[List[str]] = Field(default=None, description="Match any of these file types")
    language: Optional[str] = Field(default=None, description="Document language code")
    folder_id: Optional[int] = Field(default=None, description="Parent folder id")
    is_featured: Optional[bool] = Field(default=None, description="Featured flag")
    date_from: Optional[datetime] = Field(default=None, description="Created at or after (inclusive); naive values are UTC")
    date_to: Optional[datetime] = Field(default=None, description="Created at or before (inclusive); naive values are UTC, a bare date covers the whole day")
    min_rating: Optional[float] = Field(default=None, ge=0.0, le=5.0, description="Minimum average rating (inclusive)")

    # Sorting
    sort_by: SortOption = Field(default=SortOption.RELEVANCE, description="Sort mode")
    sort_order: SortOrder = Field(default=SortOrder.DESC, description="Sort direction, ignored for RELEVANCE")

    # Pagination (zero-based)
    page: int = Field(default=0, ge=0, description="Page number (0-based)")
    size: int = Field(default=20, ge=1, le=100, description="Results per page")

    # Search options
    fuzzy_search: bool = Field(default=True, description="Tolerate typos in query terms")
    highlight_results: bool = Field(default=True, description="Return highlighted fragments")
    include_aggregations: bool = Field(default=False, description="Return facet counts for the matching set")

    @field_validator('date_to', mode='before')
    @classmethod
    def extend_bare_date_to_end_of_day(cls, value):
        # A date without a time means the end of that day
        if isinstance(value, str) and DATE_ONLY.match(value.strip()):
            value = date.fromisoformat(value.strip())
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime.combine(value, time.max)
        return value

    @model_validator(mode='after')
    def validate_date_range(self):
        if self.date_from and self.date_to and to_utc(self.date_to) < to_utc(self.date_from):
            raise ValueError('dateTo must not be before dateFrom')
        return self

    @property
    def has_query(self) -> bool:
        return bool(self.query and self.query.strip())


class SearchResult(CamelModel):
    """Single search hit shaped for a results list."""
    document_id: int
    title: str
    description: Optional[str] = None
    score: Optional[float] = None
    highlights: Dict[str, List[str]] = Field(default_factory=dict)

    author_id: Optional[int] = None
    author_name: Optional[str] = None
    author_username: Optional[str] = None

    file_name: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    thumbnail_url: Optional[str] = None

    tags: List[str] = Field(default_factory=list)
    subject_ids: List[int] = Field(default_factory=list)
    subject_names: List[str] = Field(default_factory=list)
    folder_id: Optional[int] = None
    folder_name: Optional[str] = None

    status: Optional[DocumentStatus] = None
    visibility: Optional[DocumentVisibility] = None
    is_featured: bool = False
    language: Optional[str] = None

    view_count: int = 0
    download_count: int = 0
    favourite_count: int = 0
    rating_average: Optional[float] = None
    rating_count: int = 0

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SearchAggregations(CamelModel):
    """Facet counts over the full matching set."""
    tag_counts: Dict[str, int] = Field(default_factory=dict)
    subject_counts: Dict[str, int] = Field(default_factory=dict)
    file_type_counts: Dict[str, int] = Field(default_factory=dict)
    author_counts: Dict[str, int] = Field(default_factory=dict)


class SearchResponse(CamelModel):
    """Paginated search response."""
    results: List[SearchResult]
    total_hits: int
    page: int
    size: int
    total_pages: int
    query: Optional[str] = None
    search_time_ms: int = 0
    aggregations: Optional[SearchAggregations] = None


class AutocompleteResponse(CamelModel):
    query: str
    suggestions: List[str]


class SimilarDocumentsResponse(CamelModel):
    document_id: int
    similar: List[SearchResult]
    count: int


class ReindexResponse(CamelModel):
    message: str
    documents_indexed: int
    documents_failed: int = 0


class ReindexDocumentResponse(CamelModel):
    message: str
    document_id: int
    outcome: str


class AuthorReindexResponse(CamelModel):
    message: str
    user_id: int
    documents_indexed: int
    documents_failed: int = 0


class IndexStats(CamelModel):
    index_name: str
    enabled: bool
    index_exists: bool
    document_count: int
