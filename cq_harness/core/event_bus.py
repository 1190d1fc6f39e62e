"""Event bus that delivers CQ callbacks to registered listeners."""

import logging
from typing import Any, Callable, Dict, List, Tuple

from pyee import EventEmitter

from .event_payloads import CqEvent
from .event_topics import CqEventTopics

logger = logging.getLogger(__name__)


class CqEventBus:
    """Synchronous fan-out of CQ callbacks.

    Each ``deliver*`` call emits on the calling thread, so several delivery
    threads may publish at once. A failing listener is logged and never
    raises back into the delivering thread.
    """

    def __init__(self):
        """Initialize the event bus."""
        self._emitter = EventEmitter()
        self._emitter.on("error", self._on_handler_error)
        self._registrations: Dict[int, List[Tuple[CqEventTopics, Callable]]] = {}

    def _on_handler_error(self, error: Exception) -> None:
        logger.error(f"CQ listener failed while handling an event: {error!r}")

    def _guard(self, handler: Callable) -> Callable:
        """Wrap a handler so one failing listener does not starve the others."""

        def guarded(*args: Any) -> None:
            try:
                handler(*args)
            except Exception as e:
                self._emitter.emit("error", e)

        return guarded

    def _emit(self, topic: CqEventTopics, *args: Any) -> None:
        self._emitter.emit(topic, *args)

    def register(self, listener: Any) -> None:
        """Subscribe a listener's callbacks to every CQ topic.

        Args:
            listener: Object exposing on_event, on_error, on_cq_connected,
                on_cq_disconnected and close
        """
        if id(listener) in self._registrations:
            return
        handlers = [
            (CqEventTopics.CQ_EVENT, self._guard(listener.on_event)),
            (CqEventTopics.CQ_ERROR, self._guard(listener.on_error)),
            (CqEventTopics.CQ_CONNECTED, self._guard(listener.on_cq_connected)),
            (CqEventTopics.CQ_DISCONNECTED, self._guard(listener.on_cq_disconnected)),
            (CqEventTopics.CQ_CLOSED, self._guard(listener.close)),
        ]
        for topic, handler in handlers:
            self._emitter.on(topic, handler)
        self._registrations[id(listener)] = handlers
        logger.debug(f"Registered listener {listener!r}")

    def unregister(self, listener: Any) -> None:
        """Remove a listener's callbacks. Unknown listeners are ignored."""
        handlers = self._registrations.pop(id(listener), [])
        for topic, handler in handlers:
            self._emitter.remove_listener(topic, handler)

    @property
    def listener_count(self) -> int:
        return len(self._registrations)

    def deliver(self, event: CqEvent) -> None:
        self._emit(CqEventTopics.CQ_EVENT, event)

    def deliver_error(self, event: CqEvent) -> None:
        self._emit(CqEventTopics.CQ_ERROR, event)

    def connected(self) -> None:
        self._emit(CqEventTopics.CQ_CONNECTED)

    def disconnected(self) -> None:
        self._emit(CqEventTopics.CQ_DISCONNECTED)

    def closed(self) -> None:
        self._emit(CqEventTopics.CQ_CLOSED)

    def remove_all_listeners(self) -> None:
        """Remove every registered listener."""
        for handlers in self._registrations.values():
            for topic, handler in handlers:
                self._emitter.remove_listener(topic, handler)
        self._registrations.clear()
