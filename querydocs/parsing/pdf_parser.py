"""PDF inspection using pypdf.

Checks a document before it is uploaded and reads what the development
backend needs from it: page count, metadata and text.
"""

import io
import logging

from pydantic import BaseModel, Field
from pypdf import PdfReader
from pypdf.errors import PdfReadError

logger = logging.getLogger(__name__)

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
PDF_MAGIC_BYTES = b"%PDF"

_METADATA_KEYS = {
    "/Title": "title",
    "/Author": "author",
    "/Subject": "subject",
    "/Creator": "creator",
    "/Producer": "producer",
}


class PDFContent(BaseModel):
    """What was read from a PDF file.

    Attributes:
        text: Text of all pages, pages separated by blank lines.
        pages: Number of pages.
        metadata: Document info fields that were present.
    """

    text: str
    pages: int = Field(ge=1)
    metadata: dict[str, str]


class PDFParseError(Exception):
    """Raised when a file is not a usable PDF."""

    pass


def check_pdf_bytes(content: bytes) -> None:
    """Reject content that cannot be a PDF without parsing it.

    Raises:
        PDFParseError: If the content is empty, too large or lacks the PDF header.
    """
    if not content:
        raise PDFParseError("Empty file provided")

    if len(content) > MAX_FILE_SIZE:
        size_mb = len(content) / (1024 * 1024)
        raise PDFParseError(f"File size ({size_mb:.1f}MB) exceeds maximum allowed (10MB)")

    if not content.lstrip()[:10].startswith(PDF_MAGIC_BYTES):
        raise PDFParseError("Invalid PDF: file does not start with PDF header")


def _read_metadata(reader: PdfReader) -> dict[str, str]:
    metadata: dict[str, str] = {}
    try:
        info = reader.metadata
        if info:
            for key, name in _METADATA_KEYS.items():
                value = info.get(key)
                if value:
                    metadata[name] = str(value)
    except Exception as e:
        logger.warning(f"Failed to read PDF metadata: {e}")
    return metadata


def inspect_pdf(content: bytes) -> PDFContent:
    """Validate a PDF and read its text, page count and metadata.

    Args:
        content: Raw bytes of the PDF file.

    Returns:
        PDFContent for the document.

    Raises:
        PDFParseError: If the file is empty, too large, corrupt or has no pages.
    """
    check_pdf_bytes(content)

    try:
        reader = PdfReader(io.BytesIO(content))
        pages = len(reader.pages)
    except PdfReadError as e:
        raise PDFParseError(f"Corrupt or invalid PDF: {e}") from e
    except Exception as e:
        raise PDFParseError(f"Failed to read PDF: {e}") from e

    if pages == 0:
        raise PDFParseError("PDF contains no pages")

    texts: list[str] = []
    for number, page in enumerate(reader.pages, start=1):
        try:
            text = page.extract_text()
        except Exception as e:
            logger.warning(f"Failed to extract text from page {number}: {e}")
            continue
        if text and text.strip():
            texts.append(text.strip())

    if not texts:
        logger.info("PDF has no extractable text (may be scanned/image-based)")

    return PDFContent(
        text="\n\n".join(texts),
        pages=pages,
        metadata=_read_metadata(reader),
    )
