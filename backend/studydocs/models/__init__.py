from .user import User
from .folder import Folder
from .taxonomy import Tag, Subject, document_tags, document_subjects
from .document import Document, DocumentStatus, DocumentVisibility

__all__ = [
    "User",
    "Folder",
    "Tag",
    "Subject",
    "document_tags",
    "document_subjects",
    "Document",
    "DocumentStatus",
    "DocumentVisibility",
]
