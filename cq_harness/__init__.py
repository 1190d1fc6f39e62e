"""cq_harness - test instrumentation for continuous query listeners."""

from .config import WaitConfig
from .exceptions import CqHarnessError, WaitTimeoutError
from .listener import CqQueryTestListener
from .core import CqEvent, CqEventBus, CqEventTopics, ListenerCounts, Operation
from .utils.event_synchronizer import EventSynchronizer, WaitCondition

__version__ = "0.1.0"

__all__ = [
    "CqEvent",
    "CqEventBus",
    "CqEventTopics",
    "CqHarnessError",
    "CqQueryTestListener",
    "EventSynchronizer",
    "ListenerCounts",
    "Operation",
    "WaitCondition",
    "WaitConfig",
    "WaitTimeoutError",
]
