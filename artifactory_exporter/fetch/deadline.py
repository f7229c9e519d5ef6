"""Deadlines bounding a single fetch."""

import threading
import time
from collections.abc import Callable


class Deadline:
    """Absolute expiry time with an explicit cancellation flag.

    A deadline is shared between the caller and the fetcher. The fetcher
    waits for the response no longer than the remaining time and registers
    a callback with `on_cancel` so that `cancel()` wakes it immediately.

    Thread-safe: `cancel()` may be called from any thread.
    """

    def __init__(
        self,
        expires_at: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the deadline.

        Args:
            expires_at: Clock reading after which the deadline has passed.
            clock: Monotonic clock used for all comparisons.
        """
        self._expires_at = expires_at
        self._clock = clock
        self._cancelled = threading.Event()
        self._callbacks: list[Callable[[], None]] = []
        self._lock = threading.Lock()

    @classmethod
    def after(
        cls,
        seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> "Deadline":
        """Create a deadline that expires `seconds` from now."""
        return cls(clock() + seconds, clock=clock)

    def cancel(self) -> None:
        """Cancel the deadline immediately and run the cancel callbacks."""
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
            callbacks = list(self._callbacks)
            self._callbacks.clear()
        for callback in callbacks:
            callback()

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a callback run once when the deadline is cancelled.

        The callback runs right away if the deadline is already cancelled.

        Args:
            callback: Called from the cancelling thread.

        Returns:
            Function that unregisters the callback.
        """
        with self._lock:
            if not self._cancelled.is_set():
                self._callbacks.append(callback)
                return lambda: self._unregister(callback)
        callback()
        return lambda: None

    def _unregister(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    @property
    def cancelled(self) -> bool:
        """Whether `cancel()` was called."""
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        """Whether the expiry time has passed."""
        return self._clock() >= self._expires_at

    @property
    def done(self) -> bool:
        """Whether the fetch must be abandoned."""
        return self.cancelled or self.expired

    def remaining(self) -> float:
        """Seconds left before expiry, zero once done."""
        if self.cancelled:
            return 0.0
        return max(0.0, self._expires_at - self._clock())

    def reason(self) -> str:
        """Describe why the deadline is done."""
        if self.cancelled:
            return "cancelled"
        return "deadline exceeded"
