"""
Content extractor adapter: object storage + document parser.
"""

import logging
from typing import Optional

from ..core.document_parser import DocumentParser
from .record import CONTENT_LIMIT

logger = logging.getLogger(__name__)


class ContentExtractor:
    """
    Fetches a stored file and returns its plain text, or None.

    Extraction is best effort: a missing object or any parser/storage failure
    is logged and yields None so the enclosing indexing operation proceeds
    with empty content.
    """

    def __init__(self, storage, parser: Optional[DocumentParser] = None, max_length: int = CONTENT_LIMIT):
        self.storage = storage
        self.parser = parser or DocumentParser()
        self.max_length = max_length

    def extract_text(self, object_key: Optional[str], file_name_hint: Optional[str] = None) -> Optional[str]:
        if not object_key:
            return None

        try:
            data = self.storage.download_bytes(object_key)
            if data is None:
                logger.warning(f"Could not download file {object_key} from storage")
                return None

            text = self.parser.extract_text(data, self.max_length, file_name_hint)
        except Exception as e:
            logger.error(f"Failed to extract content from file {object_key}: {str(e)}")
            return None

        if not text or not text.strip():
            return None

        # Capped text is already left-stripped by the writer and keeps its full length
        if len(text) < self.max_length:
            text = text.strip()
        logger.debug(f"Extracted {len(text)} characters of text from {file_name_hint or object_key}")
        return text
