"""
Client side of the conversion round trip.

``SubmissionController`` stages image files and options, sends them to the
service in one multipart POST and saves the returned PDF. It is a small
state machine: ``idle`` while the user edits the selection, ``submitting``
while a request is in flight, and back to ``idle`` whatever the outcome.
"""

import logging
import mimetypes
import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional

import httpx

from pixelforge.client.config import resolve_api_url
from pixelforge.core.exceptions import TransportError
from pixelforge.schemas.conversion import sanitize_filename

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Conversion failed. Please try again."


class SubmissionState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


class SubmissionController:
    """Stages files and options and submits them for conversion."""

    def __init__(
        self,
        api_url: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.api_url = (api_url or resolve_api_url()).rstrip("/")
        self.http_client = http_client
        self.files: List[Path] = []
        self.compression_level = "normal"
        self.filename = "converted"
        self.state = SubmissionState.IDLE
        self.last_error: Optional[TransportError] = None

    def endpoint(self, path: str) -> str:
        return f"{self.api_url}{path}"

    def select_files(self, paths: Iterable) -> None:
        """Replace the staged selection; an empty selection changes nothing."""
        selected = [Path(p) for p in paths]
        if selected:
            self.files = selected

    def set_compression_level(self, value: str) -> None:
        self.compression_level = value

    def set_filename(self, value: str) -> None:
        self.filename = value

    def apply_preset(self, preset: str) -> None:
        """Shortcut buttons: ``ultra`` and ``compressed`` or else ``normal``."""
        if preset == "ultra":
            self.set_compression_level("ultra")
        elif preset == "compressed":
            self.set_compression_level("compressed")
        else:
            self.set_compression_level("normal")

    @property
    def can_submit(self) -> bool:
        return bool(self.files) and self.state is SubmissionState.IDLE

    def _build_parts(self) -> list:
        # Field order: every image in selection order, then the options.
        parts = []
        for path in self.files:
            content_type = (
                mimetypes.guess_type(path.name)[0] or "application/octet-stream"
            )
            parts.append(("images", (path.name, path.read_bytes(), content_type)))
        parts.append(("compressionLevel", (None, self.compression_level)))
        parts.append(("filename", (None, self.filename)))
        return parts

    def _post(self, parts: list) -> httpx.Response:
        if self.http_client is not None:
            return self.http_client.post(self.endpoint("/convert"), files=parts)
        with httpx.Client(timeout=None) as client:
            return client.post(self.endpoint("/convert"), files=parts)

    def _save(self, content: bytes, download_dir: Path) -> Path:
        download_dir.mkdir(parents=True, exist_ok=True)
        target = download_dir / f"{sanitize_filename(self.filename)}.pdf"

        fd, tmp_name = tempfile.mkstemp(
            dir=download_dir, prefix=".pixelforge-", suffix=".part"
        )
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(content)
            os.replace(tmp_name, target)
        finally:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
        return target

    def submit(self, download_dir=".") -> Optional[Path]:
        """
        Send the staged files and save the returned PDF.

        Args:
            download_dir: Directory receiving ``<filename>.pdf``

        Returns:
            Path of the saved PDF, or None when there was nothing to submit

        Raises:
            TransportError: On a network failure or a non-2xx response. The
                staged selection is kept so the caller can resubmit.
        """
        if not self.can_submit:
            logger.debug("Submit ignored in state %s", self.state.value)
            return None

        self.state = SubmissionState.SUBMITTING
        self.last_error = None
        try:
            try:
                response = self._post(self._build_parts())
            except (httpx.HTTPError, OSError) as e:
                logger.error("Conversion request failed: %s", e)
                raise TransportError(FAILURE_MESSAGE) from e

            if not response.is_success:
                logger.error(
                    "Conversion failed with HTTP status %s", response.status_code
                )
                raise TransportError(
                    FAILURE_MESSAGE, status_code=response.status_code
                )

            path = self._save(response.content, Path(download_dir))
            logger.info("Saved %s (%d bytes)", path, len(response.content))
            return path
        except TransportError as e:
            self.last_error = e
            raise
        finally:
            self.state = SubmissionState.IDLE
