"""Observable load status and last error."""

from __future__ import annotations

import logging
import threading
from collections import deque

from .models import LoadStatus

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 64  # most recent transitions kept for observers


class LoaderState:
    """
    Status and last error of the model pipeline.

    Owned by the host and passed to the loader. Fields are written by
    the load task and read by any number of observers (UI, CLI). Each
    field is updated atomically on its own; the (status, error) pair
    is not a transaction, so readers may see one updated without the
    other.
    """

    def __init__(self, status: LoadStatus = LoadStatus.UNINITIALISED):
        self._status = status
        self._last_error: str | None = None
        self._status_lock = threading.Lock()
        self._error_lock = threading.Lock()
        self._history: deque[LoadStatus] = deque(maxlen=HISTORY_LIMIT)

    @property
    def status(self) -> LoadStatus:
        with self._status_lock:
            return self._status

    @status.setter
    def status(self, value: LoadStatus) -> None:
        with self._status_lock:
            if value is self._status:
                return
            logger.debug(f"Status {self._status.name} -> {value.name}")
            self._status = value
            self._history.append(value)

    @property
    def history(self) -> list[LoadStatus]:
        """Most recent status transitions since the last ``reset_history``."""
        with self._status_lock:
            return list(self._history)

    def reset_history(self) -> None:
        with self._status_lock:
            self._history.clear()

    @property
    def last_error(self) -> str | None:
        with self._error_lock:
            return self._last_error

    def set_error(self, message: str) -> None:
        with self._error_lock:
            self._last_error = message

    def clear_error(self) -> None:
        with self._error_lock:
            self._last_error = None
