from __future__ import annotations

import os
from dataclasses import dataclass

from prompt2svg.core.types import ErrorKind, GenerationFailure

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_SITE_URL = "http://localhost"
DEFAULT_APP_NAME = "prompt2svg"


@dataclass(frozen=True)
class UpstreamConfig:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    provider: str = "openrouter"
    site_url: str = DEFAULT_SITE_URL  # sent as HTTP-Referer
    app_name: str = DEFAULT_APP_NAME  # sent as X-Title
    temperature: float = 0.7
    max_tokens: int = 2000
    timeout: float | None = None

    @property
    def headers(self) -> dict[str, str]:
        return {"HTTP-Referer": self.site_url, "X-Title": self.app_name}


def build_upstream_config(
    api_key: str | None = None,
    base_url: str | None = None,
    site_url: str | None = None,
    app_name: str | None = None,
    timeout: float | None = None,
) -> UpstreamConfig:
    """Build the upstream config from explicit values, falling back to the environment."""
    api_key = api_key or os.environ.get("OPENROUTER_API_KEY")
    if not api_key:
        raise GenerationFailure(
            ErrorKind.MISSING_CONFIGURATION, "Missing OPENROUTER_API_KEY"
        )

    if timeout is None and os.environ.get("OPENROUTER_TIMEOUT"):
        timeout = float(os.environ["OPENROUTER_TIMEOUT"])

    return UpstreamConfig(
        api_key=api_key,
        base_url=base_url or os.environ.get("OPENROUTER_BASE_URL", DEFAULT_BASE_URL),
        site_url=site_url or os.environ.get("OPENROUTER_SITE_URL", DEFAULT_SITE_URL),
        app_name=app_name or os.environ.get("OPENROUTER_APP_NAME", DEFAULT_APP_NAME),
        timeout=timeout,
    )
