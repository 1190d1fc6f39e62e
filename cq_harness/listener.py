"""
CQ Query Test Listener

Records every CQ event delivered to it, classified by base operation and by
query operation, and offers blocking waits over the recorded state. Delivery
threads call the ``on_*`` callbacks concurrently; the test thread calls the
``wait_for_*`` methods.
"""

import logging
import threading
from collections import deque
from typing import Any, FrozenSet, Optional, Tuple

from .config import WaitConfig
from .core.event_payloads import CqEvent, ListenerCounts
from .core.operations import Operation
from .utils.atomic import AtomicCounter, ConcurrentSet
from .utils.event_synchronizer import EventSynchronizer, WaitCondition

logger = logging.getLogger(__name__)


class CqQueryTestListener:
    """
    Test listener for continuous query events.

    Counters only ever grow. ``reset()`` clears the key sets and the close
    flag but leaves counters and recorded errors alone, so a listener can be
    reused across several wait phases of one scenario.
    """

    def __init__(
        self,
        cq_name: Optional[str] = None,
        user_name: Optional[str] = None,
        config: Optional[WaitConfig] = None,
        log: Optional[logging.Logger] = None,
    ):
        """Initialize the listener.

        Args:
            cq_name: Name of the query this listener is attached to
            user_name: Optional user the query runs as
            config: Wait timing defaults, read from the environment when omitted
            log: Logger to use instead of the module logger
        """
        self.cq_name = cq_name
        self.user_name = user_name
        self._logger = log or logger
        self._synchronizer = EventSynchronizer(config)

        self._total_event_count = AtomicCounter()
        self._event_create_count = AtomicCounter()
        self._event_update_count = AtomicCounter()
        self._event_delete_count = AtomicCounter()
        self._event_invalidate_count = AtomicCounter()
        self._event_error_count = AtomicCounter()

        self._event_query_insert_count = AtomicCounter()
        self._event_query_update_count = AtomicCounter()
        self._event_query_delete_count = AtomicCounter()
        self._event_query_invalidate_count = AtomicCounter()

        self._cqs_connected_count = AtomicCounter()
        self._cqs_disconnected_count = AtomicCounter()

        self._event_close = threading.Event()
        self._event_region_clear = threading.Event()
        self._event_region_invalidate = threading.Event()

        self._creates = ConcurrentSet()
        self._updates = ConcurrentSet()
        self._destroys = ConcurrentSet()
        self._invalidates = ConcurrentSet()
        self._errors = ConcurrentSet()

        # deque.append is atomic, arrival order is preserved
        self._keys: deque = deque()
        self._cq_events: deque = deque()

    # Callbacks

    def on_event(self, event: CqEvent) -> None:
        """Record a delivered CQ event. Never raises.

        The base and query axes are classified independently, so a failure
        on one never skips the other.
        """
        try:
            base_operation, query_operation, key = self._record_arrival(event)
        except Exception as e:
            self._logger.error(f"Error recording event for CQ {self.cq_name}: {e}")
            return

        try:
            self._classify_base(base_operation, key)
        except Exception as e:
            self._logger.error(f"Error classifying base operation for CQ {self.cq_name}: {e}")

        try:
            self._classify_query(query_operation)
        except Exception as e:
            self._logger.error(f"Error classifying query operation for CQ {self.cq_name}: {e}")

    def _record_arrival(self, event: CqEvent) -> Tuple[Operation, Operation, Any]:
        total = self._total_event_count.increment()

        base_operation = event.base_operation
        query_operation = event.query_operation
        key = event.key

        self._logger.debug(
            f"CqEvent for the CQ: {self.cq_name}; Key={key}; baseOp={base_operation}; "
            f"queryOp={query_operation}; totalEventCount={total}"
        )

        if key is not None:
            self._keys.append(key)
            self._cq_events.append(event)
        return base_operation, query_operation, key

    def _add_key(self, keys: ConcurrentSet, key: Any) -> None:
        try:
            keys.add(key)
        except TypeError as e:
            # Unhashable keys stay in the ordered key sequence only
            self._logger.warning(f"Key {key!r} for CQ {self.cq_name} cannot be tracked in a key set: {e}")

    def _classify_base(self, base_operation: Operation, key: Any) -> None:
        # Set insert precedes the counter increment
        if base_operation.is_update():
            self._add_key(self._updates, key)
            self._event_update_count.increment()
        elif base_operation.is_create():
            self._add_key(self._creates, key)
            self._event_create_count.increment()
        elif base_operation.is_destroy():
            self._add_key(self._destroys, key)
            self._event_delete_count.increment()
        elif base_operation.is_invalidate():
            self._add_key(self._invalidates, key)
            self._event_delete_count.increment()
            self._event_invalidate_count.increment()

    def _classify_query(self, query_operation: Operation) -> None:
        if query_operation.is_update():
            self._event_query_update_count.increment()
        elif query_operation.is_create():
            self._event_query_insert_count.increment()
        elif query_operation.is_destroy():
            self._event_query_delete_count.increment()
        elif query_operation.is_invalidate():
            self._event_query_invalidate_count.increment()
        elif query_operation.is_clear():
            self._event_region_clear.set()
        elif query_operation.is_region_invalidate():
            self._event_region_invalidate.set()

    def on_error(self, event: CqEvent) -> None:
        """Record an error event. A missing failure is recorded as None.

        Errors count toward the total like any other delivered event.
        """
        self._total_event_count.increment()
        try:
            self._errors.add(event.failure_description)
        except Exception as e:
            self._logger.error(f"Error recording error event for CQ {self.cq_name}: {e}")
            self._errors.add(None)
        self._event_error_count.increment()

    def on_cq_connected(self) -> None:
        self._cqs_connected_count.increment()

    def on_cq_disconnected(self) -> None:
        self._cqs_disconnected_count.increment()

    def close(self) -> None:
        self._event_close.set()

    def reset(self) -> None:
        """Clear the key sets and the close flag. Counters are kept."""
        self._destroys.clear()
        self._creates.clear()
        self._invalidates.clear()
        self._updates.clear()
        self._event_close.clear()

    # Accessors

    @property
    def total_event_count(self) -> int:
        return self._total_event_count.value

    @property
    def create_event_count(self) -> int:
        return self._event_create_count.value

    @property
    def update_event_count(self) -> int:
        return self._event_update_count.value

    @property
    def delete_event_count(self) -> int:
        return self._event_delete_count.value

    @property
    def invalidate_event_count(self) -> int:
        return self._event_invalidate_count.value

    @property
    def error_event_count(self) -> int:
        return self._event_error_count.value

    @property
    def query_insert_event_count(self) -> int:
        return self._event_query_insert_count.value

    @property
    def query_update_event_count(self) -> int:
        return self._event_query_update_count.value

    @property
    def query_delete_event_count(self) -> int:
        return self._event_query_delete_count.value

    @property
    def query_invalidate_event_count(self) -> int:
        return self._event_query_invalidate_count.value

    @property
    def cqs_connected_count(self) -> int:
        return self._cqs_connected_count.value

    @property
    def cqs_disconnected_count(self) -> int:
        return self._cqs_disconnected_count.value

    @property
    def is_closed(self) -> bool:
        return self._event_close.is_set()

    @property
    def region_cleared(self) -> bool:
        return self._event_region_clear.is_set()

    @property
    def region_invalidated(self) -> bool:
        return self._event_region_invalidate.is_set()

    @property
    def creates(self) -> FrozenSet[Any]:
        return self._creates.snapshot()

    @property
    def updates(self) -> FrozenSet[Any]:
        return self._updates.snapshot()

    @property
    def destroys(self) -> FrozenSet[Any]:
        return self._destroys.snapshot()

    @property
    def invalidates(self) -> FrozenSet[Any]:
        return self._invalidates.snapshot()

    @property
    def errors(self) -> FrozenSet[Optional[str]]:
        return self._errors.snapshot()

    @property
    def keys(self) -> Tuple[Any, ...]:
        """Keys of all keyed events, in arrival order, duplicates kept."""
        return tuple(self._keys)

    @property
    def events(self) -> Tuple[CqEvent, ...]:
        """All keyed events, in arrival order."""
        return tuple(self._cq_events)

    def get_events(self) -> Tuple[CqEvent, ...]:
        return self.events

    def snapshot(self) -> ListenerCounts:
        """Copy every counter into a ListenerCounts model."""
        return ListenerCounts(
            total=self.total_event_count,
            creates=self.create_event_count,
            updates=self.update_event_count,
            deletes=self.delete_event_count,
            invalidates=self.invalidate_event_count,
            errors=self.error_event_count,
            query_inserts=self.query_insert_event_count,
            query_updates=self.query_update_event_count,
            query_deletes=self.query_delete_event_count,
            query_invalidates=self.query_invalidate_event_count,
            cqs_connected=self.cqs_connected_count,
            cqs_disconnected=self.cqs_disconnected_count,
        )

    def format_info(self, print_keys: bool = False) -> str:
        """Human-readable summary of counters, optionally with key sets."""
        counts = self.snapshot()
        lines = [
            f"####{self.cq_name}: Events Total :{counts.total}"
            f" Events Created :{counts.creates} Events Updated :{counts.updates}"
            f" Events Deleted :{counts.deletes} Events Invalidated :{counts.invalidates}"
            f" Query Inserts :{counts.query_inserts} Query Updates :{counts.query_updates}"
            f" Query Deletes :{counts.query_deletes} Query Invalidates :{counts.query_invalidates}"
            f" Errors :{counts.errors}"
        ]
        if print_keys:
            lines.append(
                f"Number of Insert for key : {len(self._creates)} and updates : {len(self._updates)}"
                f" and number of destroys : {len(self._destroys)}"
                f" and number of invalidates : {len(self._invalidates)}"
            )
            lines.append(f"Keys in created sets : {self._creates!r}")
            lines.append(f"Keys in updates sets : {self._updates!r}")
            lines.append(f"Keys in destroys sets : {self._destroys!r}")
            lines.append(f"Keys in invalidates sets : {self._invalidates!r}")
        return "\n".join(lines)

    def print_info(self, print_keys: bool = False) -> None:
        for line in self.format_info(print_keys).splitlines():
            self._logger.info(line)

    # Waits

    @property
    def synchronizer(self) -> EventSynchronizer:
        return self._synchronizer

    def _wait(
        self,
        condition: WaitCondition,
        timeout: Optional[float],
        poll_interval: Optional[float],
    ) -> bool:
        self._synchronizer.wait_for_event(condition, timeout=timeout, poll_interval=poll_interval)
        return True

    def wait_for_created(
        self,
        key: Any,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        return self._wait(
            WaitCondition(
                lambda: key in self._creates,
                f"never got create event for CQ {self.cq_name} key {key!r}",
            ),
            timeout,
            poll_interval,
        )

    def wait_for_destroyed(
        self,
        key: Any,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        return self._wait(
            WaitCondition(
                lambda: key in self._destroys,
                f"never got destroy event for key {key!r} in CQ {self.cq_name}",
            ),
            timeout,
            poll_interval,
        )

    def wait_for_invalidated(
        self,
        key: Any,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        return self._wait(
            WaitCondition(
                lambda: key in self._invalidates,
                f"never got invalidate event for CQ {self.cq_name} key {key!r}",
            ),
            timeout,
            poll_interval,
        )

    def wait_for_updated(
        self,
        key: Any,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        return self._wait(
            WaitCondition(
                lambda: key in self._updates,
                f"never got update event for CQ {self.cq_name} key {key!r}",
            ),
            timeout,
            poll_interval,
        )

    def wait_for_total_events(
        self,
        total: int,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        return self._wait(
            WaitCondition(
                lambda: self.total_event_count == total,
                lambda: (
                    f"Did not receive expected number of events {self.cq_name}"
                    f" expected: {total} received: {self.total_event_count}"
                ),
            ),
            timeout,
            poll_interval,
        )

    def wait_for_close(
        self,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        return self._wait(
            WaitCondition(self._event_close.is_set, f"never got close event for CQ {self.cq_name}"),
            timeout,
            poll_interval,
        )

    def wait_for_region_clear(
        self,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        return self._wait(
            WaitCondition(
                self._event_region_clear.is_set,
                f"never got region clear event for CQ {self.cq_name}",
            ),
            timeout,
            poll_interval,
        )

    def wait_for_region_invalidate(
        self,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        return self._wait(
            WaitCondition(
                self._event_region_invalidate.is_set,
                f"never got region invalidate event for CQ {self.cq_name}",
            ),
            timeout,
            poll_interval,
        )

    def wait_for_error(
        self,
        expected_message: str,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        return self._wait(
            WaitCondition(
                lambda: expected_message in self._errors,
                lambda: (
                    f"never got error event for CQ {self.cq_name} message {expected_message!r};"
                    f" errors received: {sorted(map(str, self.errors))}"
                ),
            ),
            timeout,
            poll_interval,
        )

    def wait_for_cqs_connected_events(
        self,
        total: int,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        return self._wait(
            WaitCondition(
                lambda: self.cqs_connected_count == total,
                lambda: (
                    f"Did not receive expected number of calls to cqs connected {self.cq_name}"
                    f" expected: {total} received: {self.cqs_connected_count}"
                ),
            ),
            timeout,
            poll_interval,
        )

    def wait_for_cqs_disconnected_events(
        self,
        total: int,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        return self._wait(
            WaitCondition(
                lambda: self.cqs_disconnected_count == total,
                lambda: (
                    f"Did not receive expected number of calls to cqs disconnected {self.cq_name}"
                    f" expected: {total} received: {self.cqs_disconnected_count}"
                ),
            ),
            timeout,
            poll_interval,
        )

    def wait_for_events(
        self,
        creates: int = 0,
        updates: int = 0,
        deletes: int = 0,
        query_inserts: int = 0,
        query_updates: int = 0,
        query_deletes: int = 0,
        total_events: int = 0,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        """
        Wait until every non-zero expected count matches its counter exactly.

        A zero expectation ignores that dimension. Never raises on timeout:
        callers assert on the final counters themselves. Returns whether the
        counts matched.
        """
        expected = (
            (creates, lambda: self.create_event_count),
            (updates, lambda: self.update_event_count),
            (deletes, lambda: self.delete_event_count),
            (query_inserts, lambda: self.query_insert_event_count),
            (query_updates, lambda: self.query_update_event_count),
            (query_deletes, lambda: self.query_delete_event_count),
            (total_events, lambda: self.total_event_count),
        )

        def matched() -> bool:
            return all(want <= 0 or want == actual() for want, actual in expected)

        met = self._synchronizer.wait_quietly(
            WaitCondition(matched), timeout=timeout, poll_interval=poll_interval
        )
        if not met:
            self._logger.warning(
                f"Expected events did not arrive for CQ {self.cq_name}: {self.snapshot().model_dump()}"
            )
        return met

    def __repr__(self) -> str:
        return (
            f"CqQueryTestListener(cq_name={self.cq_name!r}, user_name={self.user_name!r},"
            f" total={self.total_event_count})"
        )
