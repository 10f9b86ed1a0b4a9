"""Shared fixtures for models unit tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from chat_filter.classifier import ClassificationResult
from chat_filter.models import (
    ArtifactCache,
    FetchConfig,
    HttpFetcher,
    IntegrityVerifier,
    LoaderState,
    ManifestResolver,
    ModelDownloader,
    ModelLoader,
)
from chat_filter.tests.helpers import RouteTransport


@pytest.fixture
def temp_cache_dir(tmp_path: Path) -> Path:
    """Create temporary cache directory."""
    cache_dir = tmp_path / "model_cache"
    cache_dir.mkdir()
    return cache_dir


@pytest.fixture
def cache(temp_cache_dir: Path) -> ArtifactCache:
    """Create ArtifactCache instance with temp directory."""
    return ArtifactCache(temp_cache_dir)


@pytest.fixture
def state() -> LoaderState:
    return LoaderState()


@pytest.fixture
def fetch_config() -> FetchConfig:
    """Fetch config pointing the releases API at a test host."""
    return FetchConfig(
        user_agent="chat-filter-tests/1.0",
        timeout_seconds=5.0,
        releases_api_url="https://api.example.com",
    )


@pytest.fixture
def transport() -> RouteTransport:
    """Mock HTTP transport; tests fill in ``transport.routes``."""
    return RouteTransport()


@pytest.fixture
def fetcher(fetch_config: FetchConfig, transport: RouteTransport) -> HttpFetcher:
    return HttpFetcher(fetch_config, transport=transport)


@pytest.fixture
def resolver(
    fetcher: HttpFetcher, cache: ArtifactCache, state: LoaderState
) -> ManifestResolver:
    return ManifestResolver(fetcher, cache, state)


@pytest.fixture
def downloader(fetcher: HttpFetcher, state: LoaderState) -> ModelDownloader:
    return ModelDownloader(fetcher, state)


@pytest.fixture
def mock_classifier() -> MagicMock:
    """Classifier stand-in that accepts any bytes."""
    classifier = MagicMock()
    classifier.classify.return_value = ClassificationResult("TRADE", 0.9)
    return classifier


@pytest.fixture
def classifier_factory(mock_classifier: MagicMock) -> Callable[[], MagicMock]:
    return MagicMock(return_value=mock_classifier)


@pytest.fixture
def loader(
    cache: ArtifactCache,
    resolver: ManifestResolver,
    downloader: ModelDownloader,
    classifier_factory: Callable[[], MagicMock],
    state: LoaderState,
) -> ModelLoader:
    """ModelLoader wired with real components, mock HTTP and mock classifier."""
    return ModelLoader(
        cache=cache,
        resolver=resolver,
        downloader=downloader,
        verifier=IntegrityVerifier(),
        classifier_factory=classifier_factory,
        state=state,
    )
