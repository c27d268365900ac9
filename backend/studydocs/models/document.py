from sqlalchemy import (
    String, Text, Integer, BigInteger, Boolean, Numeric, DateTime, ForeignKey,
    Index, Enum as SQLEnum,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional
import enum

from ..database import Base
from .taxonomy import document_tags, document_subjects

if TYPE_CHECKING:
    from .user import User
    from .folder import Folder
    from .taxonomy import Tag, Subject


class DocumentStatus(str, enum.Enum):
    """Lifecycle status of a document. Only PUBLISHED documents are searchable."""
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class DocumentVisibility(str, enum.Enum):
    """Who may see a document."""
    PRIVATE = "PRIVATE"
    PUBLIC = "PUBLIC"
    SHARED = "SHARED"


class Document(Base):
    """Authoritative document row. The search index is derived from it."""
    __tablename__ = "documents"
    __table_args__ = (
        Index("idx_documents_user_id", "user_id"),
        Index("idx_documents_status", "status"),
        Index("idx_documents_status_deleted", "status", "deleted_at"),
        Index("idx_documents_folder_id", "folder_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    folder_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("folders.id"), nullable=True
    )

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # File metadata
    file_name: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    file_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    file_size: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)
    object_name: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    status: Mapped[DocumentStatus] = mapped_column(
        SQLEnum(DocumentStatus), nullable=False, default=DocumentStatus.DRAFT
    )
    visibility: Mapped[DocumentVisibility] = mapped_column(
        SQLEnum(DocumentVisibility), nullable=False, default=DocumentVisibility.PRIVATE
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="vi")

    # Statistics
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    download_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    favourite_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    rating_average: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(3, 2), nullable=True
    )
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Timestamps (stored as UTC)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, onupdate=func.now()
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    # Relationships
    author: Mapped["User"] = relationship("User", back_populates="documents")
    folder: Mapped[Optional["Folder"]] = relationship("Folder", back_populates="documents")
    tags: Mapped[List["Tag"]] = relationship(
        "Tag", secondary=document_tags, back_populates="documents"
    )
    subjects: Mapped[List["Subject"]] = relationship(
        "Subject", secondary=document_subjects, back_populates="documents"
    )

    @property
    def is_searchable(self) -> bool:
        return self.status == DocumentStatus.PUBLISHED and self.deleted_at is None

    def __repr__(self) -> str:
        return f"<Document(id={self.id}, status={self.status.value}, title={self.title!r})>"
