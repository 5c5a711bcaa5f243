"""Overlapping conversions must not leak state into each other."""

import asyncio
import io

import httpx
from PIL import Image
from pypdf import PdfReader

from pixelforge.core.config import Settings
from pixelforge.main import create_app

COLOURS = [(220, 20, 20), (20, 200, 20), (20, 20, 220)]


def jpeg(color, size=(100, 100)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color=color).save(buf, format="JPEG")
    return buf.getvalue()


def markers(pdf_bytes: bytes) -> list:
    """Strongest colour channel at the centre of each page's image."""
    result = []
    for page in PdfReader(io.BytesIO(pdf_bytes)).pages:
        image = page.images[0].image.convert("RGB")
        pixel = image.getpixel((image.width // 2, image.height // 2))
        result.append(max(range(3), key=lambda i: pixel[i]))
    return result


def asgi_client(app) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    )


def test_parallel_conversions_keep_their_own_pages(test_settings: Settings):
    app = create_app(test_settings)
    jobs = [
        ([0, 1, 2], "normal"),
        ([2, 1, 0], "compressed"),
        ([1], "ultra"),
        ([0, 0, 2, 1], "compressed"),
        ([2, 0], "normal"),
        ([1, 2, 0, 1, 2], "ultra"),
    ]

    async def convert(client, index, order, level):
        files = [
            ("images", (f"{index}-{n}.jpg", jpeg(COLOURS[c]), "image/jpeg"))
            for n, c in enumerate(order)
        ]
        return await client.post(
            "/convert",
            files=files,
            data={"compressionLevel": level, "filename": f"job{index}"},
        )

    async def main():
        async with asgi_client(app) as client:
            return await asyncio.gather(
                *(
                    convert(client, index, order, level)
                    for index, (order, level) in enumerate(jobs)
                )
            )

    responses = asyncio.run(main())

    for index, ((order, _), response) in enumerate(zip(jobs, responses)):
        assert response.status_code == 200
        assert (
            response.headers["content-disposition"]
            == f'attachment; filename="job{index}.pdf"'
        )
        assert len(PdfReader(io.BytesIO(response.content)).pages) == len(order)
        assert markers(response.content) == order


def test_apps_keep_their_own_pixel_limits(monkeypatch, test_settings: Settings):
    relaxed = create_app(test_settings)
    monkeypatch.setenv("MAX_IMAGE_PIXELS", "1000")
    strict = create_app(Settings())
    image = jpeg(COLOURS[0])

    async def post(app):
        async with asgi_client(app) as client:
            return await client.post(
                "/convert", files=[("images", ("a.jpg", image, "image/jpeg"))]
            )

    async def main():
        return await asyncio.gather(post(relaxed), post(strict), post(relaxed))

    first, limited, second = asyncio.run(main())

    assert first.status_code == 200
    assert second.status_code == 200
    assert limited.status_code == 400
    assert "too large" in limited.json()["detail"]
