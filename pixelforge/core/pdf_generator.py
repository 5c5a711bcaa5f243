"""PDF generation functionality."""

import logging
from typing import Callable, List, Optional, Tuple

import img2pdf

from pixelforge.core.exceptions import ConversionError

logger = logging.getLogger(__name__)

PAGE_SIZES = {
    "A4": (img2pdf.mm_to_pt(210), img2pdf.mm_to_pt(297)),
    "LETTER": (img2pdf.in_to_pt(8.5), img2pdf.in_to_pt(11)),
}


class PDFGenerator:
    """Assembles encoded images into a multi-page PDF document."""

    def __init__(self, page_size: str = "A4"):
        self.page_size = page_size.upper()

    def layout(self) -> Optional[Callable]:
        """
        Build the img2pdf layout function for the configured page size.

        Fixed page sizes shrink or enlarge each image to fit the page while
        keeping its aspect ratio. ``AUTO`` returns None, making every page
        exactly as large as its image.
        """
        pagesize: Optional[Tuple[float, float]] = PAGE_SIZES.get(self.page_size)
        if pagesize is None:
            return None
        return img2pdf.get_layout_fun(
            pagesize=pagesize, fit=img2pdf.FitMode.into, auto_orient=True
        )

    def images_to_pdf(
        self, images: List[bytes], title: Optional[str] = None
    ) -> bytes:
        """
        Convert encoded images into a single PDF, one image per page.

        Args:
            images: Encoded image bytes in page order
            title: Optional document title written to the PDF metadata

        Returns:
            Bytes of the assembled PDF

        Raises:
            ValueError: If no images are provided
            ConversionError: If img2pdf cannot assemble the document
        """
        if not images:
            raise ValueError("No images to convert")

        kwargs = {}
        layout_fun = self.layout()
        if layout_fun is not None:
            kwargs["layout_fun"] = layout_fun
        if title:
            kwargs["title"] = title

        try:
            pdf_bytes = img2pdf.convert(images, **kwargs)
        except img2pdf.ImageOpenError as e:
            raise ConversionError(
                f"Failed to convert image to PDF: {str(e)}"
            ) from e
        except Exception as e:
            logger.error("Unexpected error during PDF assembly: %s", str(e))
            raise ConversionError(
                f"Failed to convert image to PDF: {str(e)}"
            ) from e

        logger.debug(
            "Assembled %d page(s) into %d bytes", len(images), len(pdf_bytes)
        )
        return pdf_bytes
