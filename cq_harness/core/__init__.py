"""
cq_harness Core Package

Event vocabulary, payload models and the delivery bus.
"""

from .operations import Operation
from .event_topics import CqEventTopics
from .event_payloads import CqEvent, ListenerCounts
from .event_bus import CqEventBus

__all__ = [
    "CqEvent",
    "CqEventBus",
    "CqEventTopics",
    "ListenerCounts",
    "Operation",
]
