"""Host-side owner of the active model."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..classifier import MessageCategory
from ..models import LoadedModel, LoaderState, LoadStatus, ModelLoader
from .settings import HostSettings

logger = logging.getLogger(__name__)


class ModelService:
    """
    Own the active model and start background loads.

    Loads never block the caller: ``initialise`` schedules a task and
    returns it. A request while a model is active or a load is running
    is a no-op; use ``reload`` to replace the active model.
    """

    def __init__(
        self,
        loader: ModelLoader,
        settings: HostSettings,
        app_version: str,
        settings_path: Path | None = None,
    ):
        """
        Initialize service.

        Args:
            loader: Model loader (shares its state with this service)
            settings: Host settings (model source, persisted versions)
            app_version: Running application version, persisted with the model version
            settings_path: Where to save settings; None disables saving
        """
        self._loader = loader
        self._settings = settings
        self._app_version = app_version
        self._settings_path = settings_path
        self._model: LoadedModel | None = None
        self._task: asyncio.Task[LoadedModel | None] | None = None

    @property
    def state(self) -> LoaderState:
        return self._loader.state

    @property
    def status(self) -> LoadStatus:
        return self._loader.state.status

    @property
    def last_error(self) -> str | None:
        return self._loader.state.last_error

    @property
    def model(self) -> LoadedModel | None:
        return self._model

    @property
    def settings(self) -> HostSettings:
        return self._settings

    @property
    def is_loading(self) -> bool:
        return self._task is not None and not self._task.done()

    def initialise(self) -> asyncio.Task[LoadedModel | None] | None:
        """
        Start a background load unless a model is active or a load is running.

        Must be called from a running event loop.

        Returns:
            The load task, or None if nothing was started
        """
        if self._model is not None or self.is_loading:
            return None

        self._task = asyncio.get_running_loop().create_task(self._run_load())
        return self._task

    def reload(self) -> asyncio.Task[LoadedModel | None] | None:
        """Release the active model and start a fresh load."""
        if self.is_loading:
            logger.info("Load already in progress; ignoring reload request")
            return None

        self._release_model()
        self.state.status = LoadStatus.UNINITIALISED
        return self.initialise()

    async def wait(self) -> LoadedModel | None:
        """Wait for the in-flight load (if any) and return the active model."""
        if self._task is not None:
            await self._task
        return self._model

    async def _run_load(self) -> LoadedModel | None:
        try:
            loaded = await self._loader.load(self._settings.to_source_config())
        except Exception as e:
            self.state.status = LoadStatus.UNINITIALISED
            logger.error(f"Failed to load ML filter: {e}", exc_info=True)
            return None

        if loaded is None:
            logger.info(
                f"Machine learning model not loaded. Current status: {self.status.name}"
            )
            return None

        self._model = loaded
        self.state.status = LoadStatus.INITIALISED
        logger.info("Machine learning model loaded")

        if loaded.is_local_override:
            logger.info("Local override model in use; not updating persisted versions.")
        else:
            self._persist_versions(loaded.version)

        return loaded

    def _persist_versions(self, model_version: int) -> None:
        if not self._settings.record_loaded_versions(model_version, self._app_version):
            return

        logger.info(
            f"Persisting model version {model_version} and app version {self._app_version}"
        )
        if self._settings_path is None:
            return
        try:
            self._settings.save(self._settings_path)
        except OSError as e:
            logger.warning(f"Failed to save settings to {self._settings_path}: {e}")

    def classify_message(
        self, channel: int, message: str
    ) -> tuple[MessageCategory, float] | None:
        """
        Classify a message with the active model.

        Returns:
            (category, confidence), or None when no model is active
        """
        if self._model is None:
            return None
        return self._model.classify_message(channel, message)

    def passes_threshold(self, confidence: float) -> bool:
        """True if a confidence is high enough to act on."""
        return confidence >= self._settings.confidence_threshold

    def _release_model(self) -> None:
        if self._model is not None:
            self._model.release()
            self._model = None

    def close(self) -> None:
        """Release the active model."""
        self._release_model()
