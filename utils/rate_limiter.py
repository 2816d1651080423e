"""
Rate limiter spacing out form submissions to the same endpoint.
"""
import time
from collections import deque
from threading import Lock


class RateLimiter:
    """Thread-safe sliding-window rate limiter."""

    def __init__(self, max_calls: int, period: float = 1.0):
        """
        Initialize rate limiter.

        Args:
            max_calls: Maximum number of submissions allowed in the period
            period: Time period in seconds
        """
        if max_calls < 1:
            raise ValueError("max_calls must be at least 1")
        self.max_calls = max_calls
        self.period = period
        self.calls = deque()
        self.lock = Lock()

    def _expire(self, now: float):
        while self.calls and self.calls[0] <= now - self.period:
            self.calls.popleft()

    def wait_if_needed(self) -> float:
        """Block until another call is allowed; returns the time slept."""
        slept = 0.0
        with self.lock:
            now = time.monotonic()
            self._expire(now)

            # Wait until the oldest call leaves the window
            if len(self.calls) >= self.max_calls:
                sleep_time = self.calls[0] + self.period - now
                if sleep_time > 0:
                    time.sleep(sleep_time)
                    slept = sleep_time
                now = time.monotonic()
                self._expire(now)

            self.calls.append(now)
        return slept
