"""Tests for the storer cancellation context."""
import time

import pytest

from app.storer.context import Context
from app.storer.errors import OperationCancelled


def test_background_context_never_expires():
    ctx = Context.background()

    ctx.check("anything")

    assert not ctx.cancelled
    assert not ctx.expired


def test_cancel():
    ctx = Context.background()
    ctx.cancel()

    with pytest.raises(OperationCancelled) as exc_info:
        ctx.check("inserting order")

    assert exc_info.value.step == "inserting order"
    assert "cancelled" in str(exc_info.value)


def test_deadline_exceeded():
    ctx = Context(deadline=time.monotonic() - 0.1)

    with pytest.raises(OperationCancelled) as exc_info:
        ctx.check("getting order")

    assert "deadline exceeded" in str(exc_info.value)


def test_with_timeout():
    assert Context.with_timeout(None).deadline is None

    ctx = Context.with_timeout(60)
    assert ctx.deadline > time.monotonic()
    ctx.check("listing orders")
