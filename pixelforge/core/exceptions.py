"""Custom exceptions for the application."""

from typing import Optional


class AppError(Exception):
    """Base exception for all application-specific exceptions."""

    pass


class ValidationError(AppError):
    """Raised when a conversion request is rejected as invalid input."""

    pass


class PayloadTooLargeError(ValidationError):
    """Raised when the uploaded images exceed the configured size limit."""

    pass


class ConversionError(AppError):
    """Raised when image transformation or PDF assembly fails."""

    pass


class TransportError(AppError):
    """Raised on the client when a submission does not come back as a document."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
