"""API base URL resolution for the submission client.

The URL is looked up through an ordered list of resolvers and the first
non-empty answer wins:

1. a runtime-injected configuration (a mapping, or a JSON file named by
   ``PIXELFORGE_RUNTIME_CONFIG``) carrying ``API_URL``;
2. the ``PIXELFORGE_API_URL`` environment variable;
3. the local development fallback ``http://localhost:3000``.
"""

import json
import logging
import os
from pathlib import Path
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

RUNTIME_CONFIG_ENV = "PIXELFORGE_RUNTIME_CONFIG"
API_URL_ENV = "PIXELFORGE_API_URL"
DEFAULT_API_URL = "http://localhost:3000"


class RuntimeConfigResolver:
    """Reads ``API_URL`` from configuration injected at deploy time."""

    def __init__(
        self,
        config: Optional[Mapping[str, str]] = None,
        path: Optional[Path] = None,
    ):
        self.config = config
        self.path = path

    def _load(self) -> Optional[Mapping[str, str]]:
        if self.config is not None:
            return self.config

        path = self.path
        if path is None and os.getenv(RUNTIME_CONFIG_ENV):
            path = Path(os.environ[RUNTIME_CONFIG_ENV])
        if path is None or not path.is_file():
            return None

        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable runtime config %s: %s", path, e)
            return None

    def __call__(self) -> Optional[str]:
        config = self._load()
        if not isinstance(config, Mapping):
            return None
        return config.get("API_URL") or None


class EnvironmentResolver:
    """Reads the API URL from an environment variable."""

    def __init__(self, name: str = API_URL_ENV):
        self.name = name

    def __call__(self) -> Optional[str]:
        return os.getenv(self.name) or None


class StaticResolver:
    def __init__(self, url: str = DEFAULT_API_URL):
        self.url = url

    def __call__(self) -> Optional[str]:
        return self.url


def default_resolvers(
    runtime_config: Optional[Mapping[str, str]] = None,
) -> list:
    return [
        RuntimeConfigResolver(config=runtime_config),
        EnvironmentResolver(),
        StaticResolver(),
    ]


def resolve_api_url(resolvers: Optional[Sequence] = None) -> str:
    """Return the first non-empty URL produced by ``resolvers``."""
    for resolver in resolvers if resolvers is not None else default_resolvers():
        url = resolver()
        if url:
            return url.rstrip("/")
    raise ValueError("No API URL could be resolved")
