"""Data models for classifier module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

UNKNOWN_LABEL = "UNKNOWN"


@dataclass(frozen=True)
class ClassificationResult:
    """
    Raw output of one inference call.

    The label is whatever the model emitted; mapping it to an
    application category happens in ``categories``.
    """

    category_label: str
    confidence: float  # in [0, 1]

    @classmethod
    def unknown(cls) -> ClassificationResult:
        """Result returned when inference cannot run."""
        return cls(category_label=UNKNOWN_LABEL, confidence=0.0)


class Classifier(Protocol):
    """Narrow interface the pipeline uses to talk to an inference engine."""

    def initialize(self, model_bytes: bytes) -> None: ...

    def classify(self, channel: int, message: str) -> ClassificationResult: ...

    def release(self) -> None: ...
