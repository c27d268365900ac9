"""
SearchRecord: the denormalized unit stored in the Elasticsearch index.

The camelCase field names are the persisted index contract shared with any
other query frontend, so the Pydantic model exposes them as aliases and the
mapping below declares them verbatim.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from elasticsearch_dsl import (
    Boolean,
    Date,
    Document as IndexDocument,
    Double,
    Index,
    Integer,
    Keyword,
    Long,
    SearchAsYouType,
    Text,
    analyzer,
)
from pydantic import BaseModel, ConfigDict, Field

from ..models.document import DocumentStatus, DocumentVisibility

CONTENT_LIMIT = 10_000

# Folds diacritics so Vietnamese queries match with or without accents
folding_analyzer = analyzer(
    "folding_analyzer",
    tokenizer="standard",
    filter=["lowercase", "asciifolding"],
)


class SearchRecord(BaseModel):
    """One indexed document. Always rebuilt wholesale, never patched."""
    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)

    id: int
    title: str
    description: Optional[str] = None
    content: Optional[str] = Field(default=None, max_length=CONTENT_LIMIT)

    file_name: Optional[str] = Field(default=None, alias="fileName")
    file_type: Optional[str] = Field(default=None, alias="fileType")
    file_size: Optional[int] = Field(default=None, alias="fileSize")
    object_key: Optional[str] = Field(default=None, alias="objectKey")
    thumbnail_url: Optional[str] = Field(default=None, alias="thumbnailUrl")

    author_id: Optional[int] = Field(default=None, alias="authorId")
    author_name: Optional[str] = Field(default=None, alias="authorName")
    author_username: Optional[str] = Field(default=None, alias="authorUsername")

    tags: List[str] = Field(default_factory=list)
    subject_ids: List[int] = Field(default_factory=list, alias="subjectIds")
    subject_names: List[str] = Field(default_factory=list, alias="subjectNames")

    folder_id: Optional[int] = Field(default=None, alias="folderId")
    folder_name: Optional[str] = Field(default=None, alias="folderName")

    status: DocumentStatus
    visibility: DocumentVisibility
    is_featured: bool = Field(default=False, alias="isFeatured")
    language: Optional[str] = None

    view_count: int = Field(default=0, alias="viewCount")
    download_count: int = Field(default=0, alias="downloadCount")
    favourite_count: int = Field(default=0, alias="favouriteCount")
    rating_average: Optional[float] = Field(default=None, alias="ratingAverage")
    rating_count: int = Field(default=0, alias="ratingCount")

    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")
    indexed_at: Optional[datetime] = Field(default=None, alias="indexedAt")

    def to_index_body(self) -> Dict[str, Any]:
        """Serialize with index field names; datetimes become ISO-8601 strings."""
        return self.model_dump(by_alias=True, mode="json")


class SearchRecordMapping(IndexDocument):
    """Elasticsearch mapping for SearchRecord."""

    id = Long()
    title = Text(
        analyzer=folding_analyzer,
        fields={
            "keyword": Keyword(),
            "suggest": SearchAsYouType(analyzer=folding_analyzer),
        },
    )
    description = Text(analyzer=folding_analyzer)
    content = Text(analyzer=folding_analyzer)

    fileName = Keyword()
    fileType = Keyword()
    fileSize = Long()
    objectKey = Keyword()
    thumbnailUrl = Keyword(index=False)

    authorId = Long()
    authorName = Text(analyzer=folding_analyzer, fields={"keyword": Keyword()})
    authorUsername = Keyword()

    tags = Keyword(multi=True)
    subjectIds = Long(multi=True)
    subjectNames = Keyword(multi=True)

    folderId = Long()
    folderName = Text(analyzer=folding_analyzer, fields={"keyword": Keyword()})

    status = Keyword()
    visibility = Keyword()
    isFeatured = Boolean()
    language = Keyword()

    viewCount = Integer()
    downloadCount = Integer()
    favouriteCount = Integer()
    ratingAverage = Double()
    ratingCount = Integer()

    createdAt = Date()
    updatedAt = Date()
    indexedAt = Date()


def build_index_definition(index_name: str) -> Dict[str, Any]:
    """Settings and mappings used to create the search index."""
    index = Index(index_name)
    index.settings(number_of_shards=1, number_of_replicas=0)
    index.document(SearchRecordMapping)
    return index.to_dict()
