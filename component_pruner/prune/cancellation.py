"""Cancellation and deadline token threaded through a sweep."""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional


class CancellationToken:
    """Cooperative cancellation with an optional deadline.

    The token is checked between kinds and between deletions, and its
    remaining time bounds every cluster request.
    """

    def __init__(self, timeout: Optional[float] = None, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize token.

        Args:
            timeout: Seconds until the token expires (None for no deadline)
            clock: Monotonic clock, injectable for tests
        """
        self._event = threading.Event()
        self._clock = clock
        self._deadline = clock() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and self._clock() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, None when there is none."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def wait(self, seconds: float) -> bool:
        """Sleep up to `seconds`, waking early on cancellation.

        Returns:
            True if the token is still live after waiting
        """
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, remaining)
        if seconds > 0:
            self._event.wait(seconds)
        return not self.cancelled
