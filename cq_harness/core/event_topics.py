"""Event topics for cq_harness."""

from enum import Enum


class CqEventTopics(str, Enum):
    """Topics a CQ delivery bus publishes to its listeners."""

    CQ_EVENT = "cq.event"
    CQ_ERROR = "cq.error"
    CQ_CONNECTED = "cq.connected"
    CQ_DISCONNECTED = "cq.disconnected"
    CQ_CLOSED = "cq.closed"
