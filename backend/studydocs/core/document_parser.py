"""
Plain-text extraction for uploaded study documents.

Supports PDF (PyPDF2), DOCX (python-docx), PPTX (python-pptx) and plain text
formats. Output is written through a BoundedTextWriter so large files stop
being read as soon as the character cap is reached.
"""

import io
import logging
import mimetypes
import zipfile
from pathlib import Path
from typing import Callable, Dict, Optional

import PyPDF2
import docx
from pptx import Presentation

from .exceptions import ExtractionError, UnsupportedFormatError, WriteLimitReached

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {".txt", ".md", ".markdown", ".csv", ".tsv", ".json", ".xml", ".log"}

MIME_TO_FORMAT = {
    "application/pdf": "pdf",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": "pptx",
}


class BoundedTextWriter:
    """
    Accumulates text and raises WriteLimitReached once the cap is hit.

    Leading whitespace is dropped and trailing whitespace is held back until
    more text follows, so the cap only ever counts text that survives
    stripping.
    """

    def __init__(self, limit: int):
        self.limit = limit
        self._parts = []
        self._length = 0
        self._pending = ""

    def write(self, text: Optional[str]) -> None:
        if not text:
            return
        if self._length == 0:
            text = text.lstrip()

        body = text.rstrip()
        trailing = text[len(body):]
        if not body:
            if self._length:
                self._pending = (self._pending + trailing)[:self.limit]
            return

        chunk = self._pending + body
        self._pending = trailing[:self.limit]
        remaining = self.limit - self._length
        if len(chunk) >= remaining:
            self._parts.append(chunk[:remaining])
            self._length = self.limit
            raise WriteLimitReached(f"Write limit of {self.limit} characters reached")
        self._parts.append(chunk)
        self._length += len(chunk)

    def getvalue(self) -> str:
        return "".join(self._parts)


def detect_format(data: bytes, content_hint: Optional[str] = None) -> str:
    """
    Decide which parser handles ``data``.

    The hint may be a filename or a MIME type. Without a usable hint the
    leading bytes are inspected.
    """
    if content_hint:
        hint = content_hint.strip().lower()
        if hint in MIME_TO_FORMAT:
            return MIME_TO_FORMAT[hint]
        if hint.startswith("text/"):
            return "text"

        suffix = Path(hint).suffix
        if suffix in (".pdf", ".docx", ".pptx"):
            return suffix[1:]
        if suffix in TEXT_EXTENSIONS:
            return "text"

        guessed, _ = mimetypes.guess_type(hint)
        if guessed in MIME_TO_FORMAT:
            return MIME_TO_FORMAT[guessed]
        if guessed and guessed.startswith("text/"):
            return "text"

    # Fall back to sniffing the content
    if data.startswith(b"%PDF"):
        return "pdf"
    if data.startswith(b"PK"):
        try:
            with zipfile.ZipFile(io.BytesIO(data)) as archive:
                names = archive.namelist()
        except zipfile.BadZipFile:
            raise UnsupportedFormatError("Corrupt or unknown archive format")
        if any(name.startswith("word/") for name in names):
            return "docx"
        if any(name.startswith("ppt/") for name in names):
            return "pptx"
        raise UnsupportedFormatError("Unsupported archive-based format")
    try:
        data[:4096].decode("utf-8")
        return "text"
    except UnicodeDecodeError:
        raise UnsupportedFormatError(f"Cannot detect format for {content_hint or 'unnamed file'}")


def _parse_pdf(data: bytes, writer: BoundedTextWriter) -> None:
    reader = PyPDF2.PdfReader(io.BytesIO(data))
    if reader.is_encrypted:
        raise ExtractionError("Encrypted PDFs are not supported")
    for page in reader.pages:
        writer.write(page.extract_text() or "")
        writer.write("\n")


def _parse_docx(data: bytes, writer: BoundedTextWriter) -> None:
    document = docx.Document(io.BytesIO(data))
    for paragraph in document.paragraphs:
        if paragraph.text:
            writer.write(paragraph.text)
            writer.write("\n")


def _parse_pptx(data: bytes, writer: BoundedTextWriter) -> None:
    presentation = Presentation(io.BytesIO(data))
    for slide in presentation.slides:
        for shape in slide.shapes:
            if shape.has_text_frame and shape.text_frame.text:
                writer.write(shape.text_frame.text)
                writer.write("\n")


def _parse_text(data: bytes, writer: BoundedTextWriter) -> None:
    writer.write(data.decode("utf-8", errors="replace"))


PARSERS: Dict[str, Callable[[bytes, BoundedTextWriter], None]] = {
    "pdf": _parse_pdf,
    "docx": _parse_docx,
    "pptx": _parse_pptx,
    "text": _parse_text,
}


class DocumentParser:
    """Auto-detecting text parser with a hard output cap."""

    def extract_text(self, data: bytes, max_length: int, content_hint: Optional[str] = None) -> str:
        """
        Extract plain text from ``data``, keeping at most ``max_length`` characters.

        Hitting the cap returns the text read so far. Any other parser failure
        is raised as ExtractionError.
        """
        file_format = detect_format(data, content_hint)
        writer = BoundedTextWriter(max_length)

        try:
            PARSERS[file_format](data, writer)
        except WriteLimitReached:
            logger.debug(f"Extraction reached limit of {max_length} characters for {content_hint}")
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(f"Failed to parse {content_hint or file_format}: {e}") from e

        return writer.getvalue()
