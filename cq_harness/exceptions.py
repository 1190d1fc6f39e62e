"""Exceptions raised by cq_harness."""

from typing import Optional


class CqHarnessError(Exception):
    """Base class for cq_harness errors."""


class WaitTimeoutError(CqHarnessError, AssertionError):
    """A waited-for condition did not hold within its timeout.

    Subclasses ``AssertionError`` so test runners report it as a failure
    rather than an error.
    """

    def __init__(self, description: str, timeout: Optional[float] = None):
        self.description = description
        self.timeout = timeout
        if timeout is None:
            super().__init__(description)
        else:
            super().__init__(f"{description} (waited {timeout:.3f}s)")
