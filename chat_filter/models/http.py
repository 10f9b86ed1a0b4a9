"""Shared HTTP access for manifest, release and model requests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

USER_AGENT = "chat-filter/1.0"
RELEASES_API_URL = "https://api.github.com"


@dataclass(frozen=True)
class FetchConfig:
    """Configuration for outbound requests."""

    user_agent: str = USER_AGENT
    timeout_seconds: float = 60.0
    releases_api_url: str = RELEASES_API_URL
    max_retries: int = 3  # model re-fetches on checksum mismatch


class HttpFetcher:
    """
    Thin async GET helper.

    Every request identifies itself with the configured user agent and
    follows redirects (release assets redirect to storage hosts).
    Errors propagate as httpx exceptions; callers translate them.
    """

    def __init__(
        self,
        config: FetchConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize fetcher.

        Args:
            config: Fetch configuration
            transport: Optional transport override (tests use httpx.MockTransport)
        """
        self._config = config
        self._transport = transport

    @property
    def config(self) -> FetchConfig:
        return self._config

    def _client(self) -> httpx.AsyncClient:
        """Create a new HTTP client for a request."""
        return httpx.AsyncClient(
            headers={"User-Agent": self._config.user_agent},
            timeout=self._config.timeout_seconds,
            follow_redirects=True,
            transport=self._transport,
        )

    async def get(self, url: str) -> httpx.Response:
        """GET a URL and raise for non-2xx status."""
        logger.info(f"HTTP GET: {url}")
        async with self._client() as client:
            response = await client.get(url)
            response.raise_for_status()
            return response

    async def get_text(self, url: str) -> str:
        return (await self.get(url)).text

    async def get_bytes(self, url: str) -> bytes:
        return (await self.get(url)).content

    async def get_json(self, url: str) -> Any:
        """
        GET and decode JSON.

        Raises:
            ValueError: If the body is not JSON
        """
        return (await self.get(url)).json()
