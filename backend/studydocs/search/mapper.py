"""
Maps a DocumentSnapshot to the SearchRecord stored in the index.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Protocol

from ..utils.timeutils import to_utc
from .record import CONTENT_LIMIT, SearchRecord
from .snapshot import DocumentSnapshot

logger = logging.getLogger(__name__)


class TextSource(Protocol):
    def extract_text(self, object_key: Optional[str], file_name_hint: Optional[str]) -> Optional[str]:
        ...


def truncate_content(text: Optional[str], limit: int = CONTENT_LIMIT) -> Optional[str]:
    if text is None:
        return None
    return text[:limit]


def rating_to_float(value: Optional[Decimal]) -> Optional[float]:
    # None means "unrated" and must not collapse to 0.0
    if value is None:
        return None
    return float(value)


class IndexDocumentMapper:
    """Builds SearchRecords. The only I/O is the content extraction call."""

    def __init__(self, text_source: TextSource, content_limit: int = CONTENT_LIMIT):
        self.text_source = text_source
        self.content_limit = min(content_limit, CONTENT_LIMIT)

    def to_search_record(self, snapshot: DocumentSnapshot) -> SearchRecord:
        content = None
        if snapshot.object_name:
            content = self.text_source.extract_text(snapshot.object_name, snapshot.file_name)
        else:
            logger.debug(f"No file to extract content from for document {snapshot.id}")

        author = snapshot.author
        folder = snapshot.folder

        return SearchRecord(
            id=snapshot.id,
            title=snapshot.title,
            description=snapshot.description,
            content=truncate_content(content, self.content_limit),
            file_name=snapshot.file_name,
            file_type=snapshot.file_type,
            file_size=snapshot.file_size,
            object_key=snapshot.object_name,
            thumbnail_url=snapshot.thumbnail_url,
            author_id=author.id if author else None,
            author_name=author.full_name if author else None,
            author_username=author.username if author else None,
            tags=list(snapshot.tags or []),
            subject_ids=[subject.id for subject in (snapshot.subjects or [])],
            subject_names=[subject.name for subject in (snapshot.subjects or [])],
            folder_id=folder.id if folder else None,
            folder_name=folder.name if folder else None,
            status=snapshot.status,
            visibility=snapshot.visibility,
            is_featured=bool(snapshot.is_featured),
            language=snapshot.language,
            view_count=snapshot.view_count or 0,
            download_count=snapshot.download_count or 0,
            favourite_count=snapshot.favourite_count or 0,
            rating_average=rating_to_float(snapshot.rating_average),
            rating_count=snapshot.rating_count or 0,
            created_at=to_utc(snapshot.created_at),
            updated_at=to_utc(snapshot.updated_at),
            indexed_at=datetime.now(timezone.utc),
        )
