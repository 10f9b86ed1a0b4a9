"""Model binary download."""

from __future__ import annotations

import logging

import httpx

from .errors import ModelDownloadError
from .http import HttpFetcher
from .state import LoaderState

logger = logging.getLogger(__name__)


class ModelDownloader:
    """
    Download model bytes from the manifest's model URL.

    Single attempt per call; the checksum retry loop lives in
    IntegrityVerifier and calls back in here.
    """

    def __init__(self, fetcher: HttpFetcher, state: LoaderState):
        """
        Initialize downloader.

        Args:
            fetcher: HTTP helper
            state: Shared loader state (last error is recorded here)
        """
        self._fetcher = fetcher
        self._state = state

    async def fetch(self, url: str) -> bytes | None:
        """
        Download the model once.

        Returns:
            Model bytes, or None on any failure (logged and recorded)
        """
        try:
            data = await self._download(url)
        except ModelDownloadError as e:
            logger.error(f"Could not download newest model: {e}")
            self._state.set_error(str(e))
            return None

        logger.info(f"Downloaded {len(data)} bytes from model URL.")
        return data

    async def _download(self, url: str) -> bytes:
        """
        Raises:
            ModelDownloadError: On network or HTTP status failure
        """
        try:
            return await self._fetcher.get_bytes(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ModelDownloadError(f"Failed to download model from {url}: {e}") from e
