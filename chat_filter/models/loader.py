"""Model load state machine."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from ..classifier.errors import ClassifierError
from ..classifier.models import Classifier
from .cache import ArtifactCache, ArtifactKind
from .downloader import ModelDownloader
from .errors import HashMismatchError, InvalidManifestError, SourceNotConfiguredError
from .manifest import ManifestResolver
from .models import LoadedModel, LoadStatus, Manifest, ModelSourceConfig
from .state import LoaderState
from .verifier import IntegrityVerifier

logger = logging.getLogger(__name__)


class ModelLoader:
    """
    Acquire, verify and activate a classification model.

    Pipeline steps:
    1. Local override file, if configured and present (no network, no cache)
    2. Wait if no remote source is configured
    3. Fetch remote manifest; read cached manifest
    4. Prefer remote over cached, regardless of version
    5. Persist remote manifest source
    6. Reuse cached model if its digest matches, else download
    7. Re-download on checksum mismatch (bounded)
    8. Persist model, initialise classifier, return LoadedModel

    Every failure is logged, recorded in ``state.last_error`` and turned
    into a None result. Only one load should run at a time; callers
    serialize.
    """

    def __init__(
        self,
        cache: ArtifactCache,
        resolver: ManifestResolver,
        downloader: ModelDownloader,
        verifier: IntegrityVerifier,
        classifier_factory: Callable[[], Classifier],
        state: LoaderState,
    ):
        """
        Initialize loader with all dependencies.

        Args:
            cache: Artifact cache for manifest and model
            resolver: Manifest resolver (remote + cached)
            downloader: Model binary downloader
            verifier: Digest verifier and retry policy
            classifier_factory: Creates a fresh classifier per load
            state: Shared status / last error
        """
        self._cache = cache
        self._resolver = resolver
        self._downloader = downloader
        self._verifier = verifier
        self._classifier_factory = classifier_factory
        self._state = state

    @property
    def state(self) -> LoaderState:
        return self._state

    async def load(self, source: ModelSourceConfig) -> LoadedModel | None:
        """
        Run one load.

        Args:
            source: Model source settings

        Returns:
            Activated model, or None if no model could be activated
        """
        if source.local_model_path:
            loaded = await self._load_local_override(source.local_model_path)
            if loaded is not None:
                return loaded

        if not source.has_remote_source:
            error = SourceNotConfiguredError("No model manifest source configured.")
            self._state.status = LoadStatus.WAITING
            self._state.set_error(str(error))
            logger.warning("Waiting for model manifest source configuration.")
            return None

        self._state.status = LoadStatus.DOWNLOADING_MANIFEST

        remote = await self._resolver.fetch_remote(source)
        if remote is None:
            logger.warning(
                "Could not download remote manifest. Will attempt to use cached manifest."
            )
        else:
            logger.info(f"Downloaded manifest version {remote.manifest.version}")

        cached_manifest = await asyncio.to_thread(self._resolver.load_cached)
        manifest = remote.manifest if remote is not None else cached_manifest

        if manifest is None:
            logger.error("No manifest available (remote and cached missing). Aborting.")
            self._state.status = LoadStatus.UNINITIALISED
            self._state.set_error("Manifest not available.")
            return None

        if remote is not None:
            logger.info(f"Using remote manifest. Model URL: {manifest.model_url}")
            await asyncio.to_thread(self._resolver.save, remote)
        else:
            logger.info(f"Using cached manifest. Model URL: {manifest.model_url}")

        try:
            expected_digest = manifest.digest
        except InvalidManifestError as e:
            logger.error(f"Manifest rejected: {e}")
            self._state.status = LoadStatus.UNINITIALISED
            self._state.set_error(str(e))
            return None

        model_data = await asyncio.to_thread(self._read_cached_model, expected_digest)

        if model_data is None:
            self._state.status = LoadStatus.DOWNLOADING_MODEL
            logger.info(f"Downloading model from {manifest.model_url}")
            model_data = await self._downloader.fetch(manifest.model_url)

        if model_data is None:
            logger.warning("Could not download model.")
            self._state.status = LoadStatus.UNINITIALISED
            return None

        model_data = await self._verifier.validate_with_retry(
            model_data,
            expected_digest,
            lambda: self._downloader.fetch(manifest.model_url),
        )

        if model_data is None:
            return self._checksum_failed("re-download failed during retries")
        try:
            self._verifier.verify(model_data, expected_digest)
        except HashMismatchError as e:
            return self._checksum_failed(str(e))

        self._state.status = LoadStatus.INITIALISING
        logger.info(
            f"Model downloaded/validated. Size={len(model_data)} bytes; "
            f"SHA256={expected_digest.hex()}"
        )

        await asyncio.to_thread(self._cache.write, ArtifactKind.MODEL, model_data)

        return await self._activate(manifest, model_data)

    async def _load_local_override(self, path_str: str) -> LoadedModel | None:
        """
        Load a user-supplied model file directly.

        Failures are recorded and return None so the caller falls
        through to the remote sources.
        """
        path = Path(path_str)
        if not path.is_file():
            return None

        try:
            self._state.status = LoadStatus.INITIALISING
            logger.info(f"Using local model override: {path}")
            data = await asyncio.to_thread(path.read_bytes)
            digest_text = self._verifier.encode_digest(data)
            logger.info(
                f"Local model size: {len(data)} bytes; "
                f"SHA256: {self._verifier.compute_digest(data).hex()}"
            )

            classifier = self._classifier_factory()
            await asyncio.to_thread(classifier.initialize, data)
        except (OSError, ClassifierError) as e:
            logger.error(f"Failed to load local model override: {e}")
            self._state.set_error(str(e))
            return None

        manifest = Manifest.for_local_override(str(path), digest_text)
        self._state.status = LoadStatus.INITIALISED
        logger.info("Local model override initialised.")
        return LoadedModel(
            version=manifest.version,
            report_url=manifest.report_url,
            classifier=classifier,
        )

    def _checksum_failed(self, detail: str) -> None:
        logger.error(f"Model checksum still invalid after retries ({detail}). Aborting.")
        self._state.set_error("Checksum mismatch.")
        self._state.status = LoadStatus.UNINITIALISED

    def _read_cached_model(self, expected_digest: bytes) -> bytes | None:
        """Return the cached model if its digest matches, else None."""
        cached = self._cache.read(ArtifactKind.MODEL)
        if cached is None:
            logger.info(
                f"No cached model found at {self._cache.path(ArtifactKind.MODEL)}; "
                f"will download fresh."
            )
            return None

        if not self._verifier.matches(cached, expected_digest):
            logger.warning(
                "Cached model hash mismatch; will download fresh. "
                f"Cached SHA256={self._verifier.compute_digest(cached).hex()}"
            )
            return None

        logger.info(f"Reusing cached model ({len(cached)} bytes); SHA256 matches manifest.")
        return cached

    async def _activate(self, manifest: Manifest, model_data: bytes) -> LoadedModel | None:
        classifier = self._classifier_factory()
        try:
            await asyncio.to_thread(classifier.initialize, model_data)
        except ClassifierError as e:
            logger.error(f"Failed to initialise classifier: {e}")
            self._state.set_error(str(e))
            self._state.status = LoadStatus.UNINITIALISED
            return None

        self._state.status = LoadStatus.INITIALISED
        logger.info("Classifier initialised.")
        return LoadedModel(
            version=manifest.version,
            report_url=manifest.report_url,
            classifier=classifier,
        )
