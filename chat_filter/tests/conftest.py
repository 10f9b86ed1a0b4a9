"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from chat_filter.tests.helpers import build_classifier_model


@pytest.fixture
def model_builder() -> Callable[..., bytes]:
    """Factory for tiny ONNX classifier models."""
    return build_classifier_model


@pytest.fixture
def model_bytes() -> bytes:
    """A valid ONNX classifier predicting TRADE with a label mapping."""
    return build_classifier_model(labels=["NORMAL", "FLUFF", "TRADE"])
