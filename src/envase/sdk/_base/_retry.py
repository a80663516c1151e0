################################################################################
# © Copyright 2024 Zapata Computing Inc.
################################################################################
from dataclasses import dataclass

from .. import exceptions

RETRYABLE_STATUS_CODES = frozenset({0, 429})


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff without jitter.

    Usage::

        policy = RetryPolicy(max_retries=3, base_delay=1.0)
        if policy.should_retry(error, retries_so_far):
            await asyncio.sleep(policy.delay_for(retries_so_far + 1))

    Args:
        max_retries: how many times a request may be retried after the first
            attempt. A request is attempted at most ``max_retries + 1`` times.
        base_delay: delay in seconds before the first retry. Each subsequent retry
            waits twice as long as the previous one.
    """

    max_retries: int = 3
    base_delay: float = 1.0

    def delay_for(self, retry_number: int) -> float:
        """Seconds to wait before the ``retry_number``-th retry (counted from 1)."""
        return self.base_delay * 2 ** (retry_number - 1)

    def should_retry(self, error: exceptions.EnvaseError, retries_so_far: int) -> bool:
        if not isinstance(error, exceptions.NetworkError):
            return False
        if retries_so_far >= self.max_retries:
            return False

        status = error.status_code or 0
        return status in RETRYABLE_STATUS_CODES or status >= 500
