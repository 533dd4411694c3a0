"""PDF inspection for uploads.

Rejects files that are not usable PDFs before they are sent, and reads text
and metadata for the development backend.
"""

from querydocs.parsing.pdf_parser import (
    MAX_FILE_SIZE,
    PDFContent,
    PDFParseError,
    check_pdf_bytes,
    inspect_pdf,
)

__all__ = ["MAX_FILE_SIZE", "PDFContent", "PDFParseError", "check_pdf_bytes", "inspect_pdf"]
