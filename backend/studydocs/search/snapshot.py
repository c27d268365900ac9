"""
Fully materialized view of a document and its associations.

The index mapper only ever sees a DocumentSnapshot, so it never triggers lazy
loads against the primary store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from ..models.document import Document, DocumentStatus, DocumentVisibility


@dataclass(frozen=True)
class AuthorRef:
    id: int
    username: str
    full_name: Optional[str] = None


@dataclass(frozen=True)
class FolderRef:
    id: int
    name: str


@dataclass(frozen=True)
class SubjectRef:
    id: int
    name: str


@dataclass
class DocumentSnapshot:
    id: int
    title: str
    status: DocumentStatus
    visibility: DocumentVisibility = DocumentVisibility.PRIVATE
    description: Optional[str] = None
    file_name: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    object_name: Optional[str] = None
    thumbnail_url: Optional[str] = None
    is_featured: bool = False
    language: Optional[str] = None
    view_count: int = 0
    download_count: int = 0
    favourite_count: int = 0
    rating_average: Optional[Decimal] = None
    rating_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    author: Optional[AuthorRef] = None
    folder: Optional[FolderRef] = None
    tags: List[str] = field(default_factory=list)
    subjects: List[SubjectRef] = field(default_factory=list)

    @property
    def is_searchable(self) -> bool:
        """Only published, non-deleted documents belong in the index."""
        return self.status == DocumentStatus.PUBLISHED and self.deleted_at is None

    @classmethod
    def from_model(cls, document: Document) -> "DocumentSnapshot":
        """Copy a loaded ORM document (with its relationships) into a snapshot."""
        author = None
        if document.author is not None:
            author = AuthorRef(
                id=document.author.id,
                username=document.author.username,
                full_name=document.author.full_name,
            )

        folder = None
        if document.folder is not None:
            folder = FolderRef(id=document.folder.id, name=document.folder.name)

        return cls(
            id=document.id,
            title=document.title,
            status=document.status,
            visibility=document.visibility,
            description=document.description,
            file_name=document.file_name,
            file_type=document.file_type,
            file_size=document.file_size,
            object_name=document.object_name,
            thumbnail_url=document.thumbnail_url,
            is_featured=bool(document.is_featured),
            language=document.language,
            view_count=document.view_count or 0,
            download_count=document.download_count or 0,
            favourite_count=document.favourite_count or 0,
            rating_average=document.rating_average,
            rating_count=document.rating_count or 0,
            created_at=document.created_at,
            updated_at=document.updated_at,
            deleted_at=document.deleted_at,
            author=author,
            folder=folder,
            tags=[tag.name for tag in (document.tags or [])],
            subjects=[SubjectRef(id=s.id, name=s.name) for s in (document.subjects or [])],
        )
