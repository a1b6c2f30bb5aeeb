"""
Failures raised by storer implementations.

Every error names the ``step`` that failed (for example ``"insert order item"``)
so logs and callers can tell parent from child and insert from id lookup.
The underlying driver error is chained as ``__cause__``.
"""


class StorerError(Exception):
    """Base class for all persistence failures."""

    def __init__(self, step: str, detail: str = ""):
        self.step = step
        self.detail = detail
        message = f"error {step}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class WriteError(StorerError):
    """An insert, update or delete was rejected, or a transaction was aborted."""


class IDAssignmentError(WriteError):
    """The store accepted a write but did not report the generated id."""


class ReadError(StorerError):
    """A query was rejected by the store."""


class NotFoundError(ReadError):
    """A required row does not exist."""


class OperationCancelled(StorerError):
    """The caller's context was cancelled or its deadline passed."""
