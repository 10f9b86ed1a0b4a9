"""Manifest resolution from release lookups, direct URLs and the cache."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .cache import ArtifactCache, ArtifactKind
from .errors import (
    InvalidRepositoryError,
    ManifestAssetNotFoundError,
    ManifestFetchError,
    ManifestParseError,
    ReleaseAssetsMissingError,
    ReleaseNotFoundError,
)
from .http import HttpFetcher
from .models import FetchedManifest, Manifest, ModelSourceConfig
from .state import LoaderState

logger = logging.getLogger(__name__)


class ManifestResolver:
    """
    Obtain the model manifest.

    Remote sources (one is active per config):
    - Release lookup: query the releases API for a tag (or latest),
      find the manifest asset by name, download it
    - Direct URL: download the manifest from a fixed URL

    The cached copy is read separately so the loader can fall back to it.
    """

    def __init__(self, fetcher: HttpFetcher, cache: ArtifactCache, state: LoaderState):
        """
        Initialize resolver.

        Args:
            fetcher: HTTP helper
            cache: Artifact cache holding the last fetched manifest
            state: Shared loader state (last error is recorded here)
        """
        self._fetcher = fetcher
        self._cache = cache
        self._state = state

    async def fetch_remote(self, source: ModelSourceConfig) -> FetchedManifest | None:
        """
        Download and parse the remote manifest.

        A successful download clears the last error before parsing.
        Every failure is logged, recorded as the last error and turned
        into None.

        Returns:
            Parsed manifest with its source text, or None
        """
        try:
            if source.use_releases:
                logger.info(
                    f"Fetching manifest from releases. Repo={source.release_repo}, "
                    f"Tag={source.release_tag or 'latest'}, "
                    f"Asset={source.manifest_asset_name}"
                )
                text = await self._download_from_releases(source)
            else:
                url = (source.manifest_url or "").strip()
                if not url:
                    return None
                logger.info(f"Fetching manifest from URL: {url}")
                text = await self._download_text(url)

            self._state.clear_error()
            return FetchedManifest(manifest=Manifest.from_yaml(text), source=text)

        except ManifestParseError as e:
            logger.error(f"Could not parse model manifest: {e}")
            self._state.set_error(str(e))
            return None
        except ManifestFetchError as e:
            logger.error(f"Could not download newest model manifest: {e}")
            self._state.set_error(str(e))
            return None

    def load_cached(self) -> Manifest | None:
        """
        Parse the manifest persisted by a previous successful fetch.

        Returns:
            Cached manifest, or None if absent or unparsable
        """
        data = self._cache.read(ArtifactKind.MANIFEST)
        if data is None:
            return None

        try:
            return Manifest.from_yaml(data.decode("utf-8"))
        except UnicodeDecodeError as e:
            logger.warning(f"Cached manifest is not UTF-8: {e}")
            return None
        except ManifestParseError as e:
            logger.warning(f"Failed to parse cached manifest YAML: {e}")
            return None

    def save(self, fetched: FetchedManifest) -> bool:
        """Persist the raw source text of a fetched manifest."""
        return self._cache.write(ArtifactKind.MANIFEST, fetched.source.encode("utf-8"))

    async def _download_text(self, url: str) -> str:
        try:
            return await self._fetcher.get_text(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ManifestFetchError(f"Failed to download manifest from {url}: {e}") from e

    async def _download_from_releases(self, source: ModelSourceConfig) -> str:
        """
        Resolve the manifest asset of a release and download it.

        Raises:
            InvalidRepositoryError: If repo is not "owner/repo"
            ManifestAssetNotFoundError: If no asset name is configured, or no
                usable asset has that name
            ReleaseNotFoundError: If the release does not exist
            ReleaseAssetsMissingError: If the response has no asset list
            ManifestFetchError: On network failure
        """
        repo = (source.release_repo or "").strip()
        if not repo or repo.count("/") != 1 or "" in repo.split("/"):
            raise InvalidRepositoryError(f"Invalid repository format: {repo!r}")

        asset_name = source.manifest_asset_name
        if not isinstance(asset_name, str) or not asset_name.strip():
            raise ManifestAssetNotFoundError("No manifest asset name configured")

        api_url = self._release_api_url(repo, source.release_tag)
        logger.info(f"Releases API: {api_url}")

        try:
            release = await self._fetcher.get_json(api_url)
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                raise ReleaseNotFoundError(
                    f"Release {source.release_tag or 'latest'} not found in {repo}"
                ) from e
            raise ManifestFetchError(f"Releases API request failed: {e}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ManifestFetchError(f"Releases API request failed: {e}") from e
        except ValueError as e:
            raise ReleaseAssetsMissingError(f"Invalid JSON from releases API: {e}") from e

        download_url = self._find_asset_url(release, asset_name.strip())
        logger.info(f"Downloading manifest asset from: {download_url}")
        return await self._download_text(download_url)

    def _release_api_url(self, repo: str, tag: str | None) -> str:
        base = self._fetcher.config.releases_api_url.rstrip("/")
        tag = (tag or "").strip()
        if not tag:
            return f"{base}/repos/{repo}/releases/latest"
        return f"{base}/repos/{repo}/releases/tags/{tag}"

    @staticmethod
    def _find_asset_url(release: Any, asset_name: str) -> str:
        assets = release.get("assets") if isinstance(release, dict) else None
        if not isinstance(assets, list):
            raise ReleaseAssetsMissingError("No assets in release response")

        wanted = asset_name.casefold()
        asset = next(
            (
                a
                for a in assets
                if isinstance(a, dict)
                and isinstance(a.get("name"), str)
                and a["name"].casefold() == wanted
            ),
            None,
        )
        if asset is None:
            raise ManifestAssetNotFoundError(f"Asset '{asset_name}' not found")

        url = asset.get("browser_download_url")
        if not isinstance(url, str) or not url.strip():
            raise ManifestAssetNotFoundError(
                f"Asset '{asset_name}' is missing its download URL"
            )
        return url
