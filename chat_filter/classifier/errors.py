"""Custom exceptions for classifier module."""


class ClassifierError(Exception):
    """Base exception for classifier-related errors."""

    pass


class ClassifierInitError(ClassifierError):
    """
    Raised when model bytes cannot be turned into an inference session.

    This can happen when:
    - Bytes are not a valid ONNX model
    - Model uses operators the runtime does not support
    - Model inputs don't match the channel/message contract
    """

    pass
