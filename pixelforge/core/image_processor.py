"""Per-preset image transformation."""

import io
from dataclasses import dataclass
from typing import Dict, Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from pixelforge.core.exceptions import ConversionError, ValidationError
from pixelforge.schemas.conversion import CompressionLevel


@dataclass(frozen=True)
class CompressionPreset:
    """Resize and re-encode parameters for one compression level.

    Attributes:
        max_dimension: Longest allowed side in pixels, or None to keep size
        quality: JPEG quality factor
        subsampling: JPEG chroma subsampling (0 = 4:4:4, 2 = 4:2:0)
    """

    max_dimension: Optional[int]
    quality: int
    subsampling: int


# Caps and quality only ever shrink from NORMAL to ULTRA, which keeps the
# encoded size of any given image ordered ultra <= compressed <= normal.
PRESETS: Dict[CompressionLevel, CompressionPreset] = {
    CompressionLevel.NORMAL: CompressionPreset(
        max_dimension=None, quality=95, subsampling=0
    ),
    CompressionLevel.COMPRESSED: CompressionPreset(
        max_dimension=1600, quality=70, subsampling=2
    ),
    CompressionLevel.ULTRA: CompressionPreset(
        max_dimension=1000, quality=40, subsampling=2
    ),
}


class ImageProcessor:
    """Decodes uploaded images and re-encodes them as JPEG for embedding."""

    def __init__(self, max_image_pixels: Optional[int] = None):
        self.max_image_pixels = max_image_pixels

    def open_image(self, data: bytes) -> Image.Image:
        """
        Decode image bytes fully into memory.

        Raises:
            ValidationError: If the bytes are not a decodable image
        """
        try:
            image = Image.open(io.BytesIO(data))
            self.check_size(image)
            image.load()
        except Image.DecompressionBombError as e:
            raise ValidationError(f"Image is too large: {e}") from e
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise ValidationError("File is not a valid image") from e
        return image

    def check_size(self, image: Image.Image) -> None:
        """Reject images above the pixel limit before their data is decoded."""
        if self.max_image_pixels is None:
            return
        pixels = image.width * image.height
        if pixels > self.max_image_pixels:
            raise ValidationError(
                f"Image is too large: {pixels} pixels exceeds the limit of "
                f"{self.max_image_pixels} pixels"
            )

    @staticmethod
    def prepare(image: Image.Image) -> Image.Image:
        """Orient and flatten an image into a JPEG-compatible mode."""
        if getattr(image, "is_animated", False):
            image.seek(0)
        image = ImageOps.exif_transpose(image)

        if image.mode in ("RGBA", "LA", "PA") or (
            image.mode == "P" and "transparency" in image.info
        ):
            rgba = image.convert("RGBA")
            background = Image.new("RGB", rgba.size, (255, 255, 255))
            background.paste(rgba, mask=rgba.getchannel("A"))
            return background
        if image.mode in ("RGB", "L"):
            return image
        if image.mode in ("I;16", "I"):
            return image.convert("I").point(lambda v: v / 256).convert("L")
        return image.convert("RGB")

    @staticmethod
    def resize(image: Image.Image, max_dimension: Optional[int]) -> Image.Image:
        if max_dimension is None or max(image.size) <= max_dimension:
            return image
        resized = image.copy()
        resized.thumbnail((max_dimension, max_dimension), Image.LANCZOS)
        return resized

    def transform(self, data: bytes, level: CompressionLevel) -> bytes:
        """
        Apply a compression preset to one image.

        Args:
            data: Raw uploaded image bytes
            level: Compression level selecting the preset

        Returns:
            JPEG bytes ready to be placed on a PDF page

        Raises:
            ValidationError: If the bytes are not a decodable image
            ConversionError: If re-encoding fails
        """
        preset = PRESETS[level]
        image = self.open_image(data)
        try:
            image = self.resize(self.prepare(image), preset.max_dimension)
            output = io.BytesIO()
            image.save(
                output,
                format="JPEG",
                quality=preset.quality,
                subsampling=preset.subsampling,
                optimize=True,
            )
        except (OSError, ValueError) as e:
            raise ConversionError(f"Failed to re-encode image: {e}") from e
        return output.getvalue()
