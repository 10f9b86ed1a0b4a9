"""Disk cache for the manifest and model artifacts."""

from __future__ import annotations

import logging
import os
import tempfile
from enum import Enum
from pathlib import Path

from .errors import CacheError

logger = logging.getLogger(__name__)


class ArtifactKind(Enum):
    """Cache slots. Value is the file name inside the cache directory."""

    MANIFEST = "manifest.yaml"
    MODEL = "model.onnx"


class ArtifactCache:
    """
    Store the last validated manifest source and model binary.

    Cache structure:
        cache_dir/
        ├── manifest.yaml
        └── model.onnx

    Each slot holds raw bytes with no header. Slots are written
    independently; a cached model is only reused after its digest
    matches the manifest being loaded.
    """

    def __init__(self, cache_dir: Path):
        """
        Initialize artifact cache.

        Args:
            cache_dir: Per-installation directory for cached artifacts
        """
        self._cache_dir = cache_dir
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"ArtifactCache ready at {self._cache_dir}")

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def path(self, kind: ArtifactKind) -> Path:
        """Location of a slot on disk."""
        return self._cache_dir / kind.value

    def exists(self, kind: ArtifactKind) -> bool:
        return self.path(kind).is_file()

    def read(self, kind: ArtifactKind) -> bytes | None:
        """
        Read a slot.

        Returns:
            Stored bytes, or None if the slot is empty or unreadable
        """
        path = self.path(kind)
        if not path.is_file():
            logger.debug(f"No cached {kind.name.lower()} at {path}")
            return None

        try:
            data = path.read_bytes()
        except OSError as e:
            logger.warning(f"Failed to read cached {kind.name.lower()} at {path}: {e}")
            return None

        logger.info(f"Loaded cached {kind.name.lower()} from {path} ({len(data)} bytes)")
        return data

    def write(self, kind: ArtifactKind, data: bytes) -> bool:
        """
        Overwrite a slot.

        Failures are logged and reported through the return value only.

        Returns:
            True if the slot now holds ``data``
        """
        try:
            self._write_atomic(self.path(kind), data)
        except CacheError as e:
            logger.warning(f"Failed to save cache file {kind.value}: {e}")
            return False

        logger.info(f"Saved cache file: {self.path(kind)} ({len(data)} bytes)")
        return True

    def _write_atomic(self, path: Path, data: bytes) -> None:
        """
        Write to a temp file in the cache dir, then replace the target.

        Raises:
            CacheError: If any filesystem step fails
        """
        temp_name: str | None = None
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=self._cache_dir
            )
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_name, path)
            temp_name = None
        except OSError as e:
            raise CacheError(f"Could not write {path}: {e}") from e
        finally:
            if temp_name is not None:
                Path(temp_name).unlink(missing_ok=True)
