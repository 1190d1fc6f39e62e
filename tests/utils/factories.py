"""Builders for CQ events used across the test suite."""

from cq_harness.core.event_payloads import CqEvent
from cq_harness.core.operations import Operation

FAST_TIMEOUT = 0.3
POLL_INTERVAL = 0.01


def make_event(base, query=None, key=None, **kwargs):
    """Build a CqEvent; the query operation defaults to the base operation."""
    return CqEvent(
        base_operation=base,
        query_operation=query if query is not None else base,
        key=key,
        **kwargs,
    )


def make_error(message=None):
    """Build an error CqEvent carrying ``message`` as its failure."""
    return CqEvent(
        base_operation=Operation.MARKER,
        query_operation=Operation.MARKER,
        throwable=RuntimeError(message) if message is not None else None,
    )
