"""Factory functions for creating model pipeline components."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import httpx

from ..classifier import Classifier, OnnxClassifier
from .cache import ArtifactCache
from .downloader import ModelDownloader
from .http import FetchConfig, HttpFetcher
from .loader import ModelLoader
from .manifest import ManifestResolver
from .state import LoaderState
from .verifier import IntegrityVerifier


def create_model_loader(
    cache_dir: Path,
    state: LoaderState | None = None,
    fetch_config: FetchConfig | None = None,
    classifier_factory: Callable[[], Classifier] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ModelLoader:
    """
    Create a fully-wired ModelLoader.

    This is the main entry point for the models module.
    Handles all internal wiring of cache, fetchers and verifier.

    Args:
        cache_dir: Per-installation directory for cached artifacts
        state: Optional shared state (a fresh one is created if None)
        fetch_config: Optional custom fetch config (uses defaults if None)
        classifier_factory: Optional classifier constructor (ONNX by default)
        transport: Optional httpx transport override

    Returns:
        Ready-to-use ModelLoader

    Example:
        loader = create_model_loader(Path("./model_cache"))
        model = await loader.load(ModelSourceConfig(manifest_url=url))
    """
    config = fetch_config or FetchConfig()
    state = state or LoaderState()

    cache = ArtifactCache(cache_dir)
    fetcher = HttpFetcher(config, transport=transport)

    return ModelLoader(
        cache=cache,
        resolver=ManifestResolver(fetcher, cache, state),
        downloader=ModelDownloader(fetcher, state),
        verifier=IntegrityVerifier(max_retries=config.max_retries),
        classifier_factory=classifier_factory or OnnxClassifier,
        state=state,
    )
