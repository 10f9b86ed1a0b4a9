"""ONNX Runtime backed message classifier."""

from __future__ import annotations

import json
import logging

import numpy as np
import onnxruntime as ort

from .errors import ClassifierInitError
from .models import UNKNOWN_LABEL, ClassificationResult

logger = logging.getLogger(__name__)

CHANNEL_INPUT = "channel"
MESSAGE_INPUT = "message"
LABELS_METADATA_KEY = "labels"


class OnnxClassifier:
    """
    Run single-message inference on an ONNX model.

    Model contract:
    - inputs: ``channel`` (int64, shape [1]) and ``message`` (string, shape [1])
    - output 0: predicted label (string)
    - output 1: per-category scores (float tensor, or a ZipMap sequence
      of {label: score} maps)

    If the model's custom metadata has a ``labels`` entry (JSON list or
    comma-separated names, in score order), the confidence of a result is
    the score at the predicted label's index. Otherwise it is the max score.
    ZipMap scores are looked up by label name, falling back to the max.
    """

    def __init__(self) -> None:
        self._session: ort.InferenceSession | None = None
        self._label_index: dict[str, int] | None = None

    @property
    def is_initialized(self) -> bool:
        return self._session is not None

    @property
    def label_index(self) -> dict[str, int] | None:
        """Label -> score index mapping read from model metadata."""
        return self._label_index

    def initialize(self, model_bytes: bytes) -> None:
        """
        Load a model, replacing any previously loaded one.

        Args:
            model_bytes: Serialized ONNX model

        Raises:
            ClassifierInitError: If the runtime rejects the model or its
                inputs don't match the contract
        """
        self.release()

        try:
            session = ort.InferenceSession(
                model_bytes, providers=["CPUExecutionProvider"]
            )
        except Exception as e:
            raise ClassifierInitError(f"Failed to load model: {e}") from e

        input_names = {i.name for i in session.get_inputs()}
        missing = {CHANNEL_INPUT, MESSAGE_INPUT} - input_names
        if missing:
            raise ClassifierInitError(
                f"Model is missing inputs {sorted(missing)}; has {sorted(input_names)}"
            )
        if not session.get_outputs():
            raise ClassifierInitError("Model has no outputs")

        self._session = session
        self._label_index = self._read_label_index(session)

        logger.info(
            f"Classifier initialised ({len(model_bytes)} bytes, "
            f"label mapping {'present' if self._label_index else 'absent'})"
        )

    @staticmethod
    def _read_label_index(session: ort.InferenceSession) -> dict[str, int] | None:
        metadata = session.get_modelmeta().custom_metadata_map
        raw = metadata.get(LABELS_METADATA_KEY)
        if not raw:
            return None

        try:
            names = json.loads(raw)
        except json.JSONDecodeError:
            names = raw.split(",")

        if not isinstance(names, list) or not names:
            logger.warning(f"Ignoring malformed label metadata: {raw!r}")
            return None

        index: dict[str, int] = {}
        for i, name in enumerate(names):
            # first occurrence wins
            index.setdefault(str(name).strip(), i)
        return index

    def classify(self, channel: int, message: str) -> ClassificationResult:
        """
        Classify one message.

        Never raises: returns ("UNKNOWN", 0.0) when no model is loaded
        or inference fails.
        """
        session = self._session
        if session is None:
            return ClassificationResult.unknown()

        feeds = {
            CHANNEL_INPUT: np.array([channel], dtype=np.int64),
            MESSAGE_INPUT: np.array([message], dtype=object),
        }
        try:
            outputs = session.run(None, feeds)
        except Exception as e:
            logger.error(f"Inference failed: {e}")
            return ClassificationResult.unknown()

        try:
            label = self._extract_label(outputs[0])
            confidence = self._resolve_confidence(
                label, outputs[1] if len(outputs) > 1 else None
            )
        except (TypeError, ValueError, IndexError) as e:
            logger.error(f"Unusable model output: {e}")
            return ClassificationResult.unknown()

        return ClassificationResult(category_label=label, confidence=confidence)

    @staticmethod
    def _extract_label(raw: object) -> str:
        values = np.asarray(raw).ravel()
        if values.size == 0:
            return UNKNOWN_LABEL
        value = values[0]
        return _as_text(value) if value is not None else UNKNOWN_LABEL

    def _resolve_confidence(self, label: str, raw_scores: object) -> float:
        if raw_scores is None:
            return 0.0

        # ZipMap output: one {label: score} mapping per row
        if isinstance(raw_scores, list) and raw_scores and isinstance(raw_scores[0], dict):
            by_label = {_as_text(k): float(v) for k, v in raw_scores[0].items()}
            if not by_label:
                return 0.0
            return by_label.get(label, max(by_label.values()))

        scores = np.asarray(raw_scores, dtype=np.float32).ravel()
        if scores.size == 0:
            return 0.0

        if self._label_index is not None:
            idx = self._label_index.get(label)
            if idx is not None and 0 <= idx < scores.size:
                return float(scores[idx])

        return float(scores.max())

    def release(self) -> None:
        """Drop the inference session."""
        if self._session is not None:
            logger.debug("Releasing classifier session")
        self._session = None
        self._label_index = None


def _as_text(value: object) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)
