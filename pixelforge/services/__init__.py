"""Services package initialization."""

from pixelforge.services.conversion_service import ConversionService

__all__ = [
    "ConversionService",
]
