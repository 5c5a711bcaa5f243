import os
from typing import List, Optional

ENVIRONMENTS = ("development", "production", "test")
PAGE_SIZES = ("A4", "LETTER", "AUTO")


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


class Settings:
    """Service configuration read from the environment.

    An instance is built once when the application starts and handed to the
    request handlers through ``app.state``; handlers never read the
    environment themselves.
    """

    PROJECT_NAME: str = "Pixelforge"
    PROJECT_VERSION: str = "1.0.0"

    def __init__(self) -> None:
        # Test mode skips logging setup in the application lifespan.
        self.TESTING: bool = os.getenv("TESTING", "False").lower() in (
            "true",
            "1",
            "t",
        )

        environment = os.getenv("ENVIRONMENT", "development").lower()
        self.ENVIRONMENT: str = (
            environment if environment in ENVIRONMENTS else "development"
        )

        # Server
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "3000"))

        # CORS
        self.BACKEND_CORS_ORIGINS: List[str] = _split_origins(
            os.getenv("CORS_ORIGINS", "*")
        )

        # Upload and conversion limits
        self.MAX_UPLOAD_MB: int = int(os.getenv("MAX_UPLOAD_MB", "50"))
        max_pixels = os.getenv("MAX_IMAGE_PIXELS", "89478485")
        self.MAX_IMAGE_PIXELS: Optional[int] = (
            int(max_pixels) if max_pixels else None
        )

        page_size = os.getenv("PAGE_SIZE", "A4").upper()
        self.PAGE_SIZE: str = page_size if page_size in PAGE_SIZES else "A4"

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def MAX_UPLOAD_BYTES(self) -> int:
        return self.MAX_UPLOAD_MB * 1024 * 1024
