"""Cancellation and deadlines for individual API calls."""

import threading
import time


class RequestContext:
    """Deadline and cancel flag shared between a caller and in-flight requests.

    Attach it to a call with ``with_context(ctx)``. Cancelling from another
    thread makes the call fail with ``RequestCancelledError`` before the
    request is sent or between chunks of a streamed body; an expired deadline
    fails it with ``RequestTimeoutError``.

    Example:
        ctx = RequestContext(timeout=5.0)
        pipelines, resp = client.pipelines.list_project_pipelines(1, None, with_context(ctx))
    """

    def __init__(self, timeout: float | None = None):
        self._cancelled = threading.Event()
        self.deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None when there is no deadline."""
        if self.deadline is None:
            return None
        return max(self.deadline - time.monotonic(), 0.0)
