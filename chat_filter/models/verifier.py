"""Digest verification and re-fetch policy for model bytes."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
from collections.abc import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_result,
    stop_after_attempt,
    wait_none,
)

from .errors import HashMismatchError

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3  # re-fetches after the first attempt


class IntegrityVerifier:
    """
    Verify model bytes against a manifest digest.

    Retry policy on mismatch:
    - Up to ``max_retries`` re-fetches (4 attempts total by default)
    - No delay between attempts
    - Stops early as soon as a re-fetch returns no data
    - Every mismatch is treated the same, corrupt download or wrong asset
    """

    def __init__(self, max_retries: int = DEFAULT_MAX_RETRIES):
        """
        Initialize verifier.

        Args:
            max_retries: Re-fetch budget after the initial attempt
        """
        self._max_retries = max_retries

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @staticmethod
    def compute_digest(data: bytes) -> bytes:
        """SHA-256 over the complete byte sequence."""
        return hashlib.sha256(data).digest()

    @staticmethod
    def encode_digest(data: bytes) -> str:
        """Base64 digest text, as published in manifests."""
        return base64.b64encode(IntegrityVerifier.compute_digest(data)).decode("ascii")

    def matches(self, data: bytes, expected_digest: bytes) -> bool:
        """Compare raw digest bytes."""
        return hmac.compare_digest(self.compute_digest(data), expected_digest)

    def verify(self, data: bytes, expected_digest: bytes) -> None:
        """
        Verify bytes against an expected digest.

        Raises:
            HashMismatchError: If digests differ
        """
        computed = self.compute_digest(data)
        if not hmac.compare_digest(computed, expected_digest):
            raise HashMismatchError(
                f"Hash mismatch: computed {computed.hex()}, "
                f"expected {expected_digest.hex()}"
            )

    async def validate_with_retry(
        self,
        data: bytes | None,
        expected_digest: bytes,
        refetch: Callable[[], Awaitable[bytes | None]],
    ) -> bytes | None:
        """
        Return bytes that match the digest, re-fetching on mismatch.

        Args:
            data: Bytes from the first attempt
            expected_digest: Raw digest from the manifest
            refetch: Coroutine factory that downloads the model again,
                returning None on failure

        Returns:
            The last bytes obtained. Callers must still check them: after
            an exhausted budget they are the last mismatching bytes, and
            after a failed re-fetch they are None.
        """
        if data is None or self.matches(data, expected_digest):
            return data

        logger.warning(
            f"Model checksum mismatch; computed {self.compute_digest(data).hex()}"
        )
        if self._max_retries <= 0:
            return data

        def _still_mismatched(result: bytes | None) -> bool:
            return result is not None and not self.matches(result, expected_digest)

        def _log_attempt(retry_state: RetryCallState) -> None:
            logger.warning(
                f"Redownloading model (attempt "
                f"{retry_state.attempt_number}/{self._max_retries})..."
            )

        def _last_result(retry_state: RetryCallState) -> bytes | None:
            return retry_state.outcome.result()

        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._max_retries),
            wait=wait_none(),
            retry=retry_if_result(_still_mismatched),
            before=_log_attempt,
            retry_error_callback=_last_result,
        )
        return await retrying(refetch)
