"""Pydantic schemas for image-to-PDF conversion.

These models describe one conversion round trip: the uploaded images, the
options that came with them, and the document produced in return. None of
them outlive the request that created them.
"""

import logging
import re
from enum import Enum
from pathlib import PurePosixPath, PureWindowsPath
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "converted"
PDF_MEDIA_TYPE = "application/pdf"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._ -]+")


class CompressionLevel(str, Enum):
    """Named compression presets, from best quality to smallest output."""

    NORMAL = "normal"
    COMPRESSED = "compressed"
    ULTRA = "ultra"

    @classmethod
    def normalize(cls, value: Any) -> "CompressionLevel":
        """Map a raw option value to a preset.

        Missing or unrecognized values fall back to ``normal``.
        """
        if isinstance(value, cls):
            return value
        if value is None or value == "":
            return cls.NORMAL
        try:
            return cls(value)
        except ValueError:
            logger.warning(
                "Unrecognized compression level %r, using %s",
                value,
                cls.NORMAL.value,
            )
            return cls.NORMAL


def sanitize_filename(value: Optional[str]) -> str:
    """Reduce a user supplied name to a bare, header-safe file stem."""
    if not value:
        return DEFAULT_FILENAME

    # Drop any directory part, whichever separator the sender used.
    name = PureWindowsPath(PurePosixPath(value).name).name
    name = _UNSAFE_FILENAME_CHARS.sub("", name).strip(" .")
    if name.lower().endswith(".pdf"):
        name = name[:-4].rstrip(" .")
    return name[:200] or DEFAULT_FILENAME


class ImageInput(BaseModel):
    """One uploaded image, held in memory for the duration of a request."""

    data: bytes
    content_type: Optional[str] = None
    filename: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.data)


class ConversionOptions(BaseModel):
    """Options sent alongside the images.

    Attributes:
        compression_level: Preset applied to every image
        filename: Suggested name for the download; never used as a path
    """

    model_config = ConfigDict(populate_by_name=True)

    compression_level: CompressionLevel = Field(
        default=CompressionLevel.NORMAL, alias="compressionLevel"
    )
    filename: str = DEFAULT_FILENAME

    @field_validator("compression_level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> CompressionLevel:
        return CompressionLevel.normalize(v)

    @field_validator("filename", mode="before")
    @classmethod
    def default_filename(cls, v: Any) -> Any:
        return v or DEFAULT_FILENAME

    @property
    def download_name(self) -> str:
        """Sanitized ``<name>.pdf`` suitable for a Content-Disposition header."""
        return f"{sanitize_filename(self.filename)}.pdf"


class ConversionRequest(BaseModel):
    """Ordered images plus options; list order is page order."""

    images: List[ImageInput] = Field(default_factory=list)
    options: ConversionOptions = Field(default_factory=ConversionOptions)

    @property
    def total_size(self) -> int:
        return sum(image.size for image in self.images)


class ConversionResult(BaseModel):
    """The assembled document returned for one request."""

    content: bytes
    filename: str
    page_count: int
    media_type: str = PDF_MEDIA_TYPE


class HealthResponse(BaseModel):
    status: str = "ok"
