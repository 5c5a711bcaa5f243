from pixelforge.client.config import (
    EnvironmentResolver,
    RuntimeConfigResolver,
    StaticResolver,
    default_resolvers,
    resolve_api_url,
)
from pixelforge.client.submission import SubmissionController, SubmissionState

__all__ = [
    "EnvironmentResolver",
    "RuntimeConfigResolver",
    "StaticResolver",
    "SubmissionController",
    "SubmissionState",
    "default_resolvers",
    "resolve_api_url",
]
