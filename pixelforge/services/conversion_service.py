"""
Image-to-PDF conversion service.

This module contains the business logic behind ``POST /convert``,
separated from the HTTP route definitions.
"""

import logging
from typing import List, Optional

from fastapi import HTTPException, UploadFile, status
from fastapi.concurrency import run_in_threadpool

from pixelforge.core.config import Settings
from pixelforge.core.exceptions import (
    ConversionError,
    PayloadTooLargeError,
    ValidationError,
)
from pixelforge.core.image_processor import ImageProcessor
from pixelforge.core.pdf_generator import PDFGenerator
from pixelforge.schemas.conversion import (
    ConversionOptions,
    ConversionRequest,
    ConversionResult,
    ImageInput,
    sanitize_filename,
)

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024 * 1024


class ConversionService:
    """Service for turning uploaded images into one PDF document.

    The service holds only read-only configuration; everything a request
    produces stays local to that request.
    """

    def __init__(self, settings: Settings):
        """Initialize the service from application settings."""
        self.max_upload_bytes = settings.MAX_UPLOAD_BYTES
        self.image_processor = ImageProcessor(
            max_image_pixels=settings.MAX_IMAGE_PIXELS
        )
        self.pdf_generator = PDFGenerator(page_size=settings.PAGE_SIZE)

    async def read_uploads(
        self, uploads: Optional[List[UploadFile]]
    ) -> List[ImageInput]:
        """
        Read uploaded parts into memory, keeping their order.

        Args:
            uploads: Multipart ``images`` parts as received

        Returns:
            List[ImageInput]: One entry per uploaded part

        Raises:
            PayloadTooLargeError: If the combined size exceeds the limit
        """
        images: List[ImageInput] = []
        total = 0
        for upload in uploads or []:
            chunks = []
            while True:
                chunk = await upload.read(READ_CHUNK_SIZE)
                if not chunk:
                    break
                total += len(chunk)
                if total > self.max_upload_bytes:
                    raise PayloadTooLargeError(
                        "Uploaded images exceed the "
                        f"{self.max_upload_bytes // (1024 * 1024)} MB limit"
                    )
                chunks.append(chunk)
            images.append(
                ImageInput(
                    data=b"".join(chunks),
                    content_type=upload.content_type,
                    filename=upload.filename,
                )
            )
        return images

    def convert(self, request: ConversionRequest) -> ConversionResult:
        """
        Transform every image with the requested preset and assemble the PDF.

        Args:
            request: Ordered images and conversion options

        Returns:
            ConversionResult: The assembled document

        Raises:
            ValidationError: If there are no images or one cannot be decoded
            PayloadTooLargeError: If the images exceed the size limit
            ConversionError: If re-encoding or assembly fails
        """
        if not request.images:
            raise ValidationError("No images uploaded")
        if request.total_size > self.max_upload_bytes:
            raise PayloadTooLargeError(
                "Uploaded images exceed the "
                f"{self.max_upload_bytes // (1024 * 1024)} MB limit"
            )

        level = request.options.compression_level
        logger.info(
            "Converting %d image(s) with %s compression",
            len(request.images),
            level.value,
        )

        pages = []
        for index, image in enumerate(request.images, 1):
            try:
                pages.append(self.image_processor.transform(image.data, level))
            except ValidationError as e:
                raise ValidationError(
                    f"Image {index} ({image.filename or 'unnamed'}): {e}"
                ) from e

        pdf_bytes = self.pdf_generator.images_to_pdf(
            pages, title=sanitize_filename(request.options.filename)
        )
        return ConversionResult(
            content=pdf_bytes,
            filename=request.options.download_name,
            page_count=len(pages),
        )

    async def convert_endpoint(
        self,
        uploads: Optional[List[UploadFile]],
        compression_level: Optional[str],
        filename: Optional[str],
    ) -> ConversionResult:
        """
        Handle the conversion HTTP endpoint.

        Args:
            uploads: Multipart ``images`` parts
            compression_level: Raw ``compressionLevel`` form value
            filename: Raw ``filename`` form value

        Returns:
            ConversionResult: The assembled document

        Raises:
            HTTPException: 400/413 for rejected input, 500 for internal errors
        """
        try:
            images = await self.read_uploads(uploads)
            request = ConversionRequest(
                images=images,
                options=ConversionOptions(
                    compression_level=compression_level, filename=filename
                ),
            )
            # Decoding and encoding are CPU bound; keep them off the event loop.
            result = await run_in_threadpool(self.convert, request)
            logger.info(
                "Generated %s with %d page(s), %d bytes",
                result.filename,
                result.page_count,
                len(result.content),
            )
            return result

        except PayloadTooLargeError as e:
            logger.warning("Rejected oversized upload: %s", str(e))
            raise HTTPException(
                status_code=413,
                detail=str(e),
            )
        except ValidationError as e:
            logger.warning("Validation error in convert_endpoint: %s", str(e))
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)
            )
        except ConversionError as e:
            logger.error("Conversion failed: %s", str(e), exc_info=True)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An error occurred while processing your request",
            )
        except Exception as e:
            logger.error(
                "Error in convert_endpoint: %s", str(e), exc_info=True
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An error occurred while processing your request",
            )
