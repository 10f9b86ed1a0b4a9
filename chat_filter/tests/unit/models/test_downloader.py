"""Unit tests for ModelDownloader."""

from __future__ import annotations

import httpx
import pytest

from chat_filter.models import LoaderState, ModelDownloader
from chat_filter.tests.helpers import MODEL_BYTES, MODEL_URL, RouteTransport


class TestFetch:
    """Tests for ModelDownloader.fetch method."""

    @pytest.mark.asyncio
    async def test_returns_bytes(
        self, downloader: ModelDownloader, transport: RouteTransport
    ) -> None:
        transport.routes[MODEL_URL] = httpx.Response(200, content=MODEL_BYTES)

        assert await downloader.fetch(MODEL_URL) == MODEL_BYTES

    @pytest.mark.asyncio
    async def test_follows_redirects(
        self, downloader: ModelDownloader, transport: RouteTransport
    ) -> None:
        """Release assets are served through a redirect to storage."""
        storage_url = "https://storage.example.com/blob/123"
        transport.routes[MODEL_URL] = httpx.Response(
            302, headers={"Location": storage_url}
        )
        transport.routes[storage_url] = httpx.Response(200, content=MODEL_BYTES)

        assert await downloader.fetch(MODEL_URL) == MODEL_BYTES

    @pytest.mark.asyncio
    async def test_does_not_touch_last_error_on_success(
        self,
        downloader: ModelDownloader,
        transport: RouteTransport,
        state: LoaderState,
    ) -> None:
        state.set_error("earlier failure")
        transport.routes[MODEL_URL] = httpx.Response(200, content=MODEL_BYTES)

        await downloader.fetch(MODEL_URL)

        assert state.last_error == "earlier failure"

    @pytest.mark.asyncio
    async def test_http_status_failure(
        self, downloader: ModelDownloader, state: LoaderState
    ) -> None:
        """Unknown URL answers 404."""
        assert await downloader.fetch(MODEL_URL) is None
        assert "Failed to download model" in state.last_error
        assert "404" in state.last_error

    @pytest.mark.asyncio
    async def test_network_failure(
        self,
        downloader: ModelDownloader,
        transport: RouteTransport,
        state: LoaderState,
    ) -> None:
        transport.routes[MODEL_URL] = httpx.ReadTimeout("timed out")

        assert await downloader.fetch(MODEL_URL) is None
        assert "timed out" in state.last_error

    @pytest.mark.asyncio
    async def test_invalid_url(
        self, downloader: ModelDownloader, state: LoaderState
    ) -> None:
        assert await downloader.fetch("not a url") is None
        assert state.last_error is not None
