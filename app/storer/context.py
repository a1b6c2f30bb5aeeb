import threading
import time
from typing import Optional

from app.storer.errors import OperationCancelled


class Context:
    """
    Cancellation and deadline token passed to every storer call.

    The storer calls :meth:`check` before each database round trip. A context
    that is cancelled or past its deadline makes the current operation raise
    :class:`OperationCancelled`; inside a transaction that triggers a rollback.

    Example:
        ctx = Context.with_timeout(2.5)
        storer.get_order(order_id, ctx=ctx)
    """

    def __init__(self, deadline: Optional[float] = None):
        # Absolute time.monotonic() value, or None for no deadline
        self.deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "Context":
        """A context that never expires unless cancelled."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: Optional[float]) -> "Context":
        if seconds is None:
            return cls()
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    def check(self, step: str) -> None:
        """Raise OperationCancelled if the context is done."""
        if self.cancelled:
            raise OperationCancelled(step, "context cancelled")
        if self.expired:
            raise OperationCancelled(step, "deadline exceeded")
