"""Shared fixtures for host unit tests."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from chat_filter.host import HostSettings, ModelService
from chat_filter.models import LoaderState
from chat_filter.tests.helpers import make_loaded_model


@pytest.fixture
def state() -> LoaderState:
    return LoaderState()


@pytest.fixture
def mock_loader(state: LoaderState) -> MagicMock:
    """Loader whose load() returns a version 7 model."""
    loader = MagicMock()
    loader.state = state
    loader.load = AsyncMock(return_value=make_loaded_model())
    return loader


@pytest.fixture
def settings() -> HostSettings:
    return HostSettings(manifest_url="https://models.example.com/manifest.yaml")


@pytest.fixture
def settings_path(tmp_path: Path) -> Path:
    return tmp_path / "settings.yaml"


@pytest.fixture
def service(
    mock_loader: MagicMock, settings: HostSettings, settings_path: Path
) -> ModelService:
    return ModelService(
        mock_loader, settings, app_version="1.2.3", settings_path=settings_path
    )
