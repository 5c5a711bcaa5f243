from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pixelforge.api.api import api_router
from pixelforge.core.config import Settings
from pixelforge.core.logging_config import setup_logging
from pixelforge.services.conversion_service import ConversionService


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    if not app.state.settings.TESTING:
        setup_logging(app.state.settings.LOG_LEVEL)
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Factory to create FastAPI app instance."""
    settings = settings or Settings()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.PROJECT_VERSION,
        description="API for converting images into a single PDF",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.conversion_service = ConversionService(settings)

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[
                str(origin) for origin in settings.BACKEND_CORS_ORIGINS
            ],
            allow_credentials="*" not in settings.BACKEND_CORS_ORIGINS,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["Content-Disposition"],
        )

    app.include_router(api_router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        return {
            "message": "Welcome to the Pixelforge Image to PDF API",
            "version": settings.PROJECT_VERSION,
            "docs": "/docs",
        }

    return app


app = create_app()
