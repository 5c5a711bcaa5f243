"""Tests for PDF generation functionality."""

import io
from unittest.mock import MagicMock, patch

import img2pdf
import pytest
from pypdf import PdfReader

from pixelforge.core.exceptions import ConversionError
from pixelforge.core.pdf_generator import PAGE_SIZES, PDFGenerator


class TestPDFGenerator:
    """Test PDF assembly."""

    @pytest.fixture
    def jpeg_pages(self, make_image) -> list:
        return [
            make_image(size=(120, 80)),
            make_image(size=(80, 120)),
            make_image(size=(100, 100)),
        ]

    def test_images_to_pdf_one_page_per_image(self, jpeg_pages: list) -> None:
        pdf_bytes = PDFGenerator().images_to_pdf(jpeg_pages)

        assert pdf_bytes.startswith(b"%PDF")
        reader = PdfReader(io.BytesIO(pdf_bytes))
        assert len(reader.pages) == 3

    def test_fixed_page_size(self, jpeg_pages: list) -> None:
        pdf_bytes = PDFGenerator("A4").images_to_pdf(jpeg_pages[2:])

        page = PdfReader(io.BytesIO(pdf_bytes)).pages[0]
        width, height = PAGE_SIZES["A4"]
        assert float(page.mediabox.width) == pytest.approx(width, abs=0.01)
        assert float(page.mediabox.height) == pytest.approx(height, abs=0.01)

    def test_letter_page_size(self, jpeg_pages: list) -> None:
        pdf_bytes = PDFGenerator("letter").images_to_pdf(jpeg_pages[2:])

        page = PdfReader(io.BytesIO(pdf_bytes)).pages[0]
        assert float(page.mediabox.width) == pytest.approx(612, abs=0.01)
        assert float(page.mediabox.height) == pytest.approx(792, abs=0.01)

    def test_auto_page_size_has_no_layout(self) -> None:
        assert PDFGenerator("AUTO").layout() is None

    def test_title_is_written(self, jpeg_pages: list) -> None:
        pdf_bytes = PDFGenerator().images_to_pdf(jpeg_pages[:1], title="report")

        reader = PdfReader(io.BytesIO(pdf_bytes))
        assert reader.metadata.title == "report"

    def test_no_images(self) -> None:
        with pytest.raises(ValueError, match="No images to convert"):
            PDFGenerator().images_to_pdf([])

    @patch("img2pdf.convert")
    def test_image_open_error(self, mock_convert: MagicMock) -> None:
        """Test handling of img2pdf rejecting an image."""
        error = img2pdf.ImageOpenError("Invalid image data")
        mock_convert.side_effect = error

        with pytest.raises(
            ConversionError,
            match="Failed to convert image to PDF: Invalid image data",
        ):
            PDFGenerator().images_to_pdf([b"invalid image data"])

        mock_convert.assert_called_once()
        assert mock_convert.call_args[0][0] == [b"invalid image data"]

    @patch("img2pdf.convert")
    def test_unexpected_error(self, mock_convert: MagicMock) -> None:
        mock_convert.side_effect = MemoryError("out of memory")

        with pytest.raises(ConversionError, match="out of memory"):
            PDFGenerator().images_to_pdf([b"data"])
