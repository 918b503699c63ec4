"""Token bucket rate limiter."""

from __future__ import annotations

import threading
import time


class RateLimiterCancelled(Exception):
    """Raised when waiting is cancelled or the limiter has been closed."""


class RateLimiter:
    """Token bucket holding ``rate`` tokens, refilled one every ``interval / rate`` seconds."""

    def __init__(self, rate: int, interval: float = 1.0) -> None:
        if rate <= 0:
            raise ValueError("rate must be positive")
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._rate = rate
        self._period = interval / rate
        self._tokens = rate
        self._last_refill = time.monotonic()
        self._lock = threading.Lock()
        self._closed = False

    def _refill(self) -> None:
        now = time.monotonic()
        ticks = int((now - self._last_refill) / self._period)
        if ticks:
            self._tokens = min(self._rate, self._tokens + ticks)
            self._last_refill += ticks * self._period

    def wait(self, cancel: threading.Event | None = None) -> None:
        """Block until a token is available.

        Raises RateLimiterCancelled if ``cancel`` is set or the limiter is closed.
        """
        while True:
            if cancel is not None and cancel.is_set():
                raise RateLimiterCancelled("wait cancelled")
            with self._lock:
                if self._closed:
                    raise RateLimiterCancelled("rate limiter closed")
                self._refill()
                if self._tokens > 0:
                    self._tokens -= 1
                    return
                delay = max(self._last_refill + self._period - time.monotonic(), 0.0)
            if cancel is not None:
                if cancel.wait(delay):
                    raise RateLimiterCancelled("wait cancelled")
            else:
                time.sleep(delay)

    def close(self) -> None:
        """Stop handing out tokens."""
        with self._lock:
            self._closed = True

    def __enter__(self) -> RateLimiter:
        return self

    def __exit__(self, *args) -> None:
        self.close()