"""Test helpers shared across unit and integration tests."""

from __future__ import annotations

import base64
import hashlib
import json
from collections.abc import Sequence
from unittest.mock import MagicMock

import httpx
from onnx import TensorProto, helper

from chat_filter.classifier import ClassificationResult
from chat_filter.models import LoadedModel

MANIFEST_URL = "https://models.example.com/manifest.yaml"
MODEL_URL = "https://models.example.com/model.onnx"
REPORT_URL = "https://reports.example.com/report"
MODEL_BYTES = b"model content"


def b64_sha256(data: bytes) -> str:
    """Base64 SHA-256 digest, as written in manifests."""
    return base64.b64encode(hashlib.sha256(data).digest()).decode("ascii")


def manifest_text(
    version: int = 7,
    model_url: str = MODEL_URL,
    model_hash: str | None = None,
    report_url: str = REPORT_URL,
) -> str:
    """Manifest YAML; model_hash defaults to the digest of MODEL_BYTES."""
    model_hash = model_hash if model_hash is not None else b64_sha256(MODEL_BYTES)
    return (
        f"version: {version}\n"
        f"model_url: {model_url}\n"
        f"model_hash: {model_hash}\n"
        f"report_url: {report_url}\n"
    )


class RouteTransport(httpx.MockTransport):
    """
    MockTransport answering from a URL -> handler table.

    A handler is an httpx.Response, a list of handlers served in order
    (the last one repeats), or an exception instance to raise.
    Unknown URLs get a 404. Every request is recorded.
    """

    def __init__(self, routes: dict | None = None):
        self.routes: dict = dict(routes or {})
        self.requests: list[httpx.Request] = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(str(request.url))

        if handler is None:
            return httpx.Response(404, text="not found")
        if isinstance(handler, list):
            handler = handler.pop(0) if len(handler) > 1 else handler[0]
        if isinstance(handler, Exception):
            raise handler
        # fresh copy: routes may serve the same response many times
        return httpx.Response(
            handler.status_code, headers=handler.headers, content=handler.content
        )

    def calls_to(self, url: str) -> int:
        return sum(1 for r in self.requests if str(r.url) == url)


def build_classifier_model(
    label: str = "TRADE",
    scores: Sequence[float] = (0.1, 0.7, 0.2),
    labels: Sequence[str] | str | None = None,
) -> bytes:
    """
    Build a tiny ONNX classifier with the channel/message contract.

    The model ignores its inputs and always predicts ``label`` with
    ``scores``. ``labels`` is stored as custom metadata (a list is JSON
    encoded, a string is stored as-is).
    """
    channel = helper.make_tensor_value_info("channel", TensorProto.INT64, [1])
    message = helper.make_tensor_value_info("message", TensorProto.STRING, [1])
    label_out = helper.make_tensor_value_info("label", TensorProto.STRING, [1])
    scores_out = helper.make_tensor_value_info(
        "probabilities", TensorProto.FLOAT, [1, len(scores)]
    )

    label_node = helper.make_node(
        "Constant",
        inputs=[],
        outputs=["label"],
        value=helper.make_tensor(
            "label_value", TensorProto.STRING, [1], [label.encode("utf-8")]
        ),
    )
    scores_node = helper.make_node(
        "Constant",
        inputs=[],
        outputs=["probabilities"],
        value=helper.make_tensor(
            "scores_value", TensorProto.FLOAT, [1, len(scores)], list(scores)
        ),
    )

    graph = helper.make_graph(
        [label_node, scores_node],
        "dummy-classifier",
        [channel, message],
        [label_out, scores_out],
    )
    model = helper.make_model(
        graph,
        producer_name="dummy-classifier",
        ir_version=8,
        opset_imports=[helper.make_opsetid("", 17)],
    )
    if labels is not None:
        value = labels if isinstance(labels, str) else json.dumps(list(labels))
        helper.set_model_props(model, {"labels": value})

    return model.SerializeToString()


def make_loaded_model(
    version: int = 7, label: str = "TRADE", confidence: float = 0.9
) -> LoadedModel:
    """LoadedModel backed by a mock classifier with a fixed prediction."""
    classifier = MagicMock()
    classifier.classify.return_value = ClassificationResult(label, confidence)
    return LoadedModel(
        version=version, report_url=REPORT_URL, classifier=classifier
    )


def build_zipmap_classifier_model(
    label: str = "TRADE",
    class_labels: Sequence[str] = ("NORMAL", "TRADE"),
    scores: Sequence[float] = (0.25, 0.75),
) -> bytes:
    """
    Build a classifier whose scores output is a ZipMap sequence of maps.

    This is the default shape of sklearn-converted classifiers.
    """
    channel = helper.make_tensor_value_info("channel", TensorProto.INT64, [1])
    message = helper.make_tensor_value_info("message", TensorProto.STRING, [1])
    label_out = helper.make_tensor_value_info("label", TensorProto.STRING, [1])
    map_out = helper.make_value_info(
        "probabilities",
        helper.make_sequence_type_proto(
            helper.make_map_type_proto(
                TensorProto.STRING,
                helper.make_tensor_type_proto(TensorProto.FLOAT, []),
            )
        ),
    )

    nodes = [
        helper.make_node(
            "Constant",
            inputs=[],
            outputs=["label"],
            value=helper.make_tensor(
                "label_value", TensorProto.STRING, [1], [label.encode("utf-8")]
            ),
        ),
        helper.make_node(
            "Constant",
            inputs=[],
            outputs=["raw_scores"],
            value=helper.make_tensor(
                "scores_value", TensorProto.FLOAT, [1, len(scores)], list(scores)
            ),
        ),
        helper.make_node(
            "ZipMap",
            inputs=["raw_scores"],
            outputs=["probabilities"],
            domain="ai.onnx.ml",
            classlabels_strings=list(class_labels),
        ),
    ]

    graph = helper.make_graph(
        nodes, "zipmap-classifier", [channel, message], [label_out, map_out]
    )
    model = helper.make_model(
        graph,
        producer_name="zipmap-classifier",
        ir_version=8,
        opset_imports=[
            helper.make_opsetid("", 17),
            helper.make_opsetid("ai.onnx.ml", 3),
        ],
    )
    return model.SerializeToString()
