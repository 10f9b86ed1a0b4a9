import json
import sys

import onnx
from onnx import TensorProto, helper

# Define a constant classifier: always predicts NORMAL
labels = ["NORMAL", "TRADE", "FLUFF"]
scores = [0.9, 0.05, 0.05]

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
    value=helper.make_tensor("label_value", TensorProto.STRING, [1], [b"NORMAL"]),
)
scores_node = helper.make_node(
    "Constant",
    inputs=[],
    outputs=["probabilities"],
    value=helper.make_tensor(
        "scores_value", TensorProto.FLOAT, [1, len(scores)], scores
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
helper.set_model_props(model, {"labels": json.dumps(labels)})
onnx.save(model, sys.argv[1] if len(sys.argv) > 1 else "dummy_classifier.onnx")
