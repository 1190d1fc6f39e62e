"""
Condition polling for listener tests.

Delivery threads update listener state at unpredictable times; the test
thread calls into ``EventSynchronizer`` to block until a condition over that
state holds. Polling happens on the calling thread with ``time.sleep``
between checks. No threads are started and no state is shared with the
delivery side beyond what the predicate reads.
"""

import time
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple, Union

from ..config import WaitConfig
from ..exceptions import WaitTimeoutError

logger = logging.getLogger(__name__)

Description = Union[str, Callable[[], str]]


@dataclass(frozen=True)
class WaitCondition:
    """A predicate paired with the message reported if it never holds.

    ``description`` may be a callable so the message can include values
    read at the moment the wait gives up.
    """

    predicate: Callable[[], bool]
    description: Description = "Timeout waiting for condition"

    def describe(self) -> str:
        if callable(self.description):
            return self.description()
        return self.description


class EventSynchronizer:
    """
    Utility class for managing timing in listener tests.
    Waits for conditions with a bounded timeout and a fixed poll cadence.
    """

    def __init__(self, config: Optional[WaitConfig] = None):
        """Initialize the synchronizer.

        Args:
            config: Timing defaults; read from the environment when omitted
        """
        self._config = config or WaitConfig.from_env()

    @property
    def config(self) -> WaitConfig:
        return self._config

    def _poll(
        self, condition: WaitCondition, timeout: float, poll_interval: float
    ) -> Tuple[bool, Optional[Exception]]:
        """Run the poll loop.

        Returns ``(met, last_error)`` where ``last_error`` is the most recent
        exception raised by the predicate, if any.
        """
        last_error: Optional[Exception] = None
        start_time = time.monotonic()
        while True:
            try:
                if condition.predicate():
                    return True, None
            except Exception as e:
                logger.debug(f"Wait predicate raised, retrying: {e!r}")
                last_error = e
            if (time.monotonic() - start_time) > timeout:
                return False, last_error
            time.sleep(poll_interval)

    def _resolve(self, timeout: Optional[float], poll_interval: Optional[float]):
        if timeout is None:
            timeout = self._config.max_wait_time
        if poll_interval is None:
            poll_interval = self._config.poll_interval
        return timeout, poll_interval

    def wait_for_event(
        self,
        condition: Union[WaitCondition, Callable[[], bool]],
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        message: Optional[str] = None,
    ) -> None:
        """
        Wait for a condition to be met with timeout.

        Args:
            condition: WaitCondition, or a bare callable returning True when met
            timeout: Maximum time to wait in seconds (config default if None)
            poll_interval: Seconds between predicate checks (config default if None)
            message: Failure message when ``condition`` is a bare callable

        Raises:
            WaitTimeoutError: If condition not met within timeout
        """
        if not isinstance(condition, WaitCondition):
            condition = WaitCondition(condition, message or "Timeout waiting for condition")
        timeout, poll_interval = self._resolve(timeout, poll_interval)

        met, last_error = self._poll(condition, timeout, poll_interval)
        if met:
            return

        description = condition.describe()
        logger.debug(f"Wait timed out after {timeout}s: {description}")
        raise WaitTimeoutError(description, timeout) from last_error

    def wait_quietly(
        self,
        condition: Union[WaitCondition, Callable[[], bool]],
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
    ) -> bool:
        """Like ``wait_for_event`` but report a timeout by returning False."""
        if not isinstance(condition, WaitCondition):
            condition = WaitCondition(condition)
        timeout, poll_interval = self._resolve(timeout, poll_interval)
        met, _ = self._poll(condition, timeout, poll_interval)
        return met

    def wait_for_value(
        self,
        getter: Callable[[], Any],
        expected_value: Any,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        message: Optional[str] = None,
    ) -> None:
        """
        Wait for a value to match expected value with timeout.

        Args:
            getter: Callable that returns the current value
            expected_value: Value to wait for
            timeout: Maximum time to wait in seconds
            poll_interval: Seconds between checks
            message: Optional custom error message

        Raises:
            WaitTimeoutError: If value not matched within timeout
        """
        if message is None:
            description: Description = (
                lambda: f"Timeout waiting for value to become {expected_value!r}, last value {getter()!r}"
            )
        else:
            description = message

        self.wait_for_event(
            WaitCondition(lambda: getter() == expected_value, description),
            timeout=timeout,
            poll_interval=poll_interval,
        )

    def wait_multiple(
        self,
        conditions: List[Union[WaitCondition, Callable[[], bool]]],
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        message: str = "Timeout waiting for multiple conditions",
    ) -> None:
        """
        Wait for multiple conditions to be met with a single timeout.

        The failure message lists the descriptions of the conditions that
        still did not hold when the wait gave up.

        Raises:
            WaitTimeoutError: If not all conditions met within timeout
        """
        wrapped = [
            c if isinstance(c, WaitCondition) else WaitCondition(c, f"condition #{i}")
            for i, c in enumerate(conditions)
        ]

        def describe() -> str:
            pending = [c.describe() for c in wrapped if not _holds(c)]
            return f"{message}: {'; '.join(pending)}" if pending else message

        self.wait_for_event(
            WaitCondition(lambda: all(c.predicate() for c in wrapped), describe),
            timeout=timeout,
            poll_interval=poll_interval,
        )


def _holds(condition: WaitCondition) -> bool:
    try:
        return bool(condition.predicate())
    except Exception:
        return False
