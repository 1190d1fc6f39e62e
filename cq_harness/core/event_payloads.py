"""Event payload models for cq_harness."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from .operations import Operation


class CqEvent(BaseModel):
    """A change notification delivered to a CQ listener."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    base_operation: Operation
    query_operation: Operation
    key: Optional[Any] = None
    new_value: Optional[Any] = None
    cq_name: Optional[str] = None
    throwable: Optional[BaseException] = None

    @property
    def failure_description(self) -> Optional[str]:
        """Message of the attached failure, None when there is none."""
        if self.throwable is None:
            return None
        return str(self.throwable)


class ListenerCounts(BaseModel):
    """Point-in-time copy of a listener's counters."""

    total: int = 0
    creates: int = 0
    updates: int = 0
    deletes: int = 0
    invalidates: int = 0
    errors: int = 0
    query_inserts: int = 0
    query_updates: int = 0
    query_deletes: int = 0
    query_invalidates: int = 0
    cqs_connected: int = 0
    cqs_disconnected: int = 0
