"""Single-shot deadline used to bound blocking receives."""
from __future__ import annotations

import time


class Deadline:
    """Countdown that is started right before a blocking call.

    ``stop()`` freezes the outcome: a deadline stopped before it ran out never
    reports itself expired. ``reset()`` makes it reusable.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._expires_at: float | None = None
        self._stopped_at: float | None = None
        self._expired = False

    @property
    def armed(self) -> bool:
        return self._expires_at is not None and self._stopped_at is None

    def start(self, seconds: float) -> None:
        if seconds < 0:
            raise ValueError(f"negative timeout: {seconds}")
        self._expires_at = self._clock() + seconds
        self._stopped_at = None
        self._expired = False

    def stop(self) -> None:
        if self._expires_at is None or self._stopped_at is not None:
            return
        self._stopped_at = self._clock()
        if self._stopped_at >= self._expires_at:
            self._expired = True

    def expire(self) -> None:
        """Mark the deadline as run out, e.g. after the socket gave up waiting."""
        self._expired = True
        if self._stopped_at is None:
            self._stopped_at = self._clock()

    def remaining(self) -> float | None:
        if self._expires_at is None:
            return None
        now = self._stopped_at if self._stopped_at is not None else self._clock()
        return max(0.0, self._expires_at - now)

    def is_expired(self) -> bool:
        if self._expired:
            return True
        if self.armed and self._clock() >= self._expires_at:  # type: ignore[operator]
            self._expired = True
        return self._expired

    def reset(self) -> None:
        self._expires_at = None
        self._stopped_at = None
        self._expired = False
