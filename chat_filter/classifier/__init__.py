"""Classifier module wrapping the inference engine behind a narrow interface."""

from .categories import MessageCategory, classify_message
from .classifier import OnnxClassifier
from .errors import ClassifierError, ClassifierInitError
from .models import UNKNOWN_LABEL, ClassificationResult, Classifier

__all__ = [
    # Errors
    "ClassifierError",
    "ClassifierInitError",
    # Models
    "ClassificationResult",
    "Classifier",
    "MessageCategory",
    "UNKNOWN_LABEL",
    # Components
    "OnnxClassifier",
    "classify_message",
]
