"""
Utility classes for cq_harness.

Thread-safe primitives and condition polling used by the listener.
"""

from .atomic import AtomicCounter, ConcurrentSet
from .event_synchronizer import EventSynchronizer, WaitCondition

__all__ = [
    'AtomicCounter',
    'ConcurrentSet',
    'EventSynchronizer',
    'WaitCondition',
]
