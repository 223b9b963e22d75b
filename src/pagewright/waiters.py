"""
Polling helpers.

wait_until blocks the calling thread, re-checking a condition at a fixed
interval until it holds or the time budget runs out.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .exceptions import WaitTimeoutError


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    timeout: float = 5.0  # Total timeout in seconds
    poll_interval: float = 1.0  # Time between retries


DEFAULT_RETRY = RetryConfig()


def wait_until(
    condition: Callable[[], Any],
    timeout_after: Optional[float] = None,
    retry_every: Optional[float] = None,
    config: Optional[RetryConfig] = None,
    message: str = "Action took too long",
) -> bool:
    """
    Wait until a condition returns True.

    Only the value ``True`` ends the wait; other truthy results keep polling.
    Exceptions raised by the condition propagate immediately.

    Args:
        condition: Zero-argument callable
        timeout_after: Maximum time to wait in seconds
        retry_every: Time between checks in seconds
        config: Defaults for the two values above (5s / 1s when omitted)
        message: Error message if the wait times out

    Returns:
        True once the condition holds

    Raises:
        WaitTimeoutError: the condition did not hold within timeout_after
    """
    config = config or DEFAULT_RETRY
    if timeout_after is None:
        timeout_after = config.timeout
    if retry_every is None:
        retry_every = config.poll_interval

    start = time.monotonic()
    while time.monotonic() - start <= timeout_after:
        if condition() is True:
            return True
        time.sleep(retry_every)

    raise WaitTimeoutError(message)


class Waiters:
    """Mixin giving pages, elements and sessions a wait_until method."""

    @property
    def retry_config(self) -> RetryConfig:
        return DEFAULT_RETRY

    def wait_until(
        self,
        condition: Callable[[], Any],
        timeout_after: Optional[float] = None,
        retry_every: Optional[float] = None,
    ) -> bool:
        return wait_until(
            condition,
            timeout_after=timeout_after,
            retry_every=retry_every,
            config=self.retry_config,
        )
