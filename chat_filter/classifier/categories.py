"""Application-level message categories."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Classifier

logger = logging.getLogger(__name__)


class MessageCategory(Enum):
    """Closed set of categories the filter acts on. Values are model labels."""

    TRADE = "TRADE"
    FREE_COMPANY = "FC"
    NORMAL = "NORMAL"
    PHISHING = "PHISH"
    RMT_CONTENT = "RMT_C"
    RMT_GIL = "RMT_G"
    ROLEPLAYING = "RP"
    STATIC = "STATIC"
    COMMUNITY = "COMMUNITY"
    STATIC_SUB = "STATIC_SUB"
    FLUFF = "FLUFF"

    @classmethod
    def from_label(cls, label: str) -> MessageCategory | None:
        """Map a model label to a category, or None if unrecognised."""
        try:
            return cls(label.strip().upper())
        except ValueError:
            return None

    @property
    def is_flagged(self) -> bool:
        return self is not MessageCategory.NORMAL


def classify_message(
    classifier: Classifier, channel: int, message: str
) -> tuple[MessageCategory, float]:
    """
    Classify a message and map the label to a category.

    Unknown labels are logged and treated as NORMAL, keeping the raw
    confidence.
    """
    prediction = classifier.classify(channel, message)
    category = MessageCategory.from_label(prediction.category_label)

    if category is None:
        logger.warning(f"Unknown message category: {prediction.category_label}")
        return MessageCategory.NORMAL, prediction.confidence

    return category, prediction.confidence
