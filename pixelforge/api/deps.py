"""Dependencies for API endpoints."""

from fastapi import Request

from pixelforge.services.conversion_service import ConversionService


def get_conversion_service(request: Request) -> ConversionService:
    """Return the conversion service built at application start."""
    return request.app.state.conversion_service
