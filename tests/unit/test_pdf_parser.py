"""Unit tests for PDF inspection."""

from collections.abc import Callable

import pytest
import pytest_check as check

from querydocs.parsing.pdf_parser import MAX_FILE_SIZE, PDFParseError, check_pdf_bytes, inspect_pdf


class TestInspectPdfValid:
    """Tests for successful PDF inspection."""

    def test_reads_page_count(self, make_pdf: Callable[..., bytes]) -> None:
        result = inspect_pdf(make_pdf(pages=3))

        assert result.pages == 3

    def test_reads_title_metadata(self, sample_pdf: bytes) -> None:
        result = inspect_pdf(sample_pdf)

        check.equal(result.pages, 1)
        check.equal(result.metadata.get("title"), "Quarterly report")

    def test_blank_pages_give_empty_text(self, make_pdf: Callable[..., bytes]) -> None:
        """Image-only or blank documents are accepted with no text."""
        result = inspect_pdf(make_pdf(pages=2))

        assert result.text == ""


class TestInspectPdfRejection:
    """Tests for PDF validation and rejection."""

    def test_rejects_empty_bytes(self) -> None:
        with pytest.raises(PDFParseError, match="Empty file"):
            inspect_pdf(b"")

    def test_rejects_non_pdf_content(self) -> None:
        with pytest.raises(PDFParseError, match="Invalid PDF"):
            inspect_pdf(b"This is a plain text file, not a PDF.")

    def test_rejects_oversized_file(self) -> None:
        oversized = b"%PDF-1.4" + b"\x00" * (MAX_FILE_SIZE + 1)

        with pytest.raises(PDFParseError, match="exceeds maximum"):
            check_pdf_bytes(oversized)

    def test_rejects_truncated_pdf(self) -> None:
        with pytest.raises(PDFParseError, match="Corrupt|Failed|no pages"):
            inspect_pdf(b"%PDF-1.4\n1 0 obj\n<<")

    def test_rejects_pdf_without_pages(self, make_pdf: Callable[..., bytes]) -> None:
        with pytest.raises(PDFParseError, match="no pages"):
            inspect_pdf(make_pdf(pages=0))
