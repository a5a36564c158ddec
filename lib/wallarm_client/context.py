from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field

from .errors import CancelledError


@dataclass
class CallContext:
    """Cancellation handle for a single ``execute`` call.

    Set ``event`` (or call ``cancel``) from another thread to stop the
    remaining attempts; ``deadline`` is a ``time.monotonic()`` timestamp.
    """

    event: threading.Event = field(default_factory=threading.Event)
    deadline: float | None = None

    @classmethod
    def with_timeout(cls, seconds: float, event: threading.Event | None = None) -> "CallContext":
        return cls(event=event or threading.Event(), deadline=time.monotonic() + max(0.0, float(seconds)))

    def cancel(self) -> None:
        self.event.set()

    def remaining(self) -> float | None:
        if self.deadline is None:
            return None
        return self.deadline - time.monotonic()

    def cancelled(self) -> bool:
        if self.event.is_set():
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self) -> None:
        if self.event.is_set():
            raise CancelledError("request cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise CancelledError("request deadline exceeded")

    def sleep(self, seconds: float) -> None:
        self.check()
        remaining = self.remaining()
        if remaining is not None and seconds >= remaining:
            raise CancelledError(f"backoff of {seconds:.2f}s would exceed the request deadline")
        if self.event.wait(seconds):
            raise CancelledError("request cancelled during backoff")
