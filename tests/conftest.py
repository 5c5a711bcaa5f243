"""Pytest configuration and fixtures for testing."""

import io
import random
from typing import Callable, Generator, Tuple

import pytest
from _pytest.monkeypatch import MonkeyPatch
from fastapi import FastAPI
from fastapi.testclient import TestClient
from PIL import Image

from pixelforge.core.config import Settings
from pixelforge.main import create_app


def encode_image(image: Image.Image, fmt: str = "JPEG") -> bytes:
    buf = io.BytesIO()
    image.save(buf, format=fmt)
    return buf.getvalue()


def noisy_image(size: Tuple[int, int], seed: int = 0) -> Image.Image:
    """A gradient with random speckles, so JPEG quality visibly matters."""
    width, height = size
    rng = random.Random(seed)
    image = Image.linear_gradient("L").resize(size).convert("RGB")
    pixels = image.load()
    for _ in range(width * height // 8):
        x, y = rng.randrange(width), rng.randrange(height)
        pixels[x, y] = (
            rng.randrange(256),
            rng.randrange(256),
            rng.randrange(256),
        )
    return image


@pytest.fixture
def test_settings(monkeypatch: MonkeyPatch) -> Settings:
    """Settings built from a clean, test-mode environment."""
    for name in (
        "PORT",
        "CORS_ORIGINS",
        "MAX_UPLOAD_MB",
        "MAX_IMAGE_PIXELS",
        "PAGE_SIZE",
        "LOG_LEVEL",
        "ENVIRONMENT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TESTING", "True")
    return Settings()


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_app(test_settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """Factory for solid-colour encoded test images."""

    def _make(
        color=(255, 255, 255),
        size: Tuple[int, int] = (100, 100),
        fmt: str = "JPEG",
        mode: str = "RGB",
    ) -> bytes:
        return encode_image(Image.new(mode, size, color=color), fmt)

    return _make


@pytest.fixture(scope="session")
def test_image() -> bytes:
    """Generate a test image for testing file uploads and conversions."""
    return encode_image(Image.new("RGB", (100, 100), color="white"), "PNG")


@pytest.fixture(scope="session")
def large_photo() -> bytes:
    """A detailed image larger than every preset's size cap."""
    return encode_image(noisy_image((2400, 1800), seed=7), "PNG")


@pytest.fixture(scope="session")
def small_photo() -> bytes:
    """A detailed image smaller than every preset's size cap."""
    return encode_image(noisy_image((300, 200), seed=3), "PNG")
