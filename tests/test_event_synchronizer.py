"""
Unit tests for EventSynchronizer

Tests the polling wait primitive: immediate success, late success, timeout
reporting and predicate failures.
"""

import threading
import time

import pytest

from cq_harness.config import WaitConfig
from cq_harness.exceptions import CqHarnessError, WaitTimeoutError
from cq_harness.utils.event_synchronizer import EventSynchronizer, WaitCondition

from .utils.factories import FAST_TIMEOUT


def set_later(flag: threading.Event, delay: float = 0.05) -> None:
    timer = threading.Timer(delay, flag.set)
    timer.daemon = True
    timer.start()


def test_true_predicate_returns_without_sleeping(synchronizer):
    calls = []

    def predicate():
        calls.append(1)
        return True

    start = time.monotonic()
    synchronizer.wait_for_event(WaitCondition(predicate, "never fails"), timeout=10.0)

    assert len(calls) == 1
    assert time.monotonic() - start < 0.5


def test_waits_until_predicate_holds(synchronizer):
    flag = threading.Event()
    set_later(flag)

    synchronizer.wait_for_event(flag.is_set, timeout=2.0)

    assert flag.is_set()


def test_timeout_raises_with_description(synchronizer):
    start = time.monotonic()
    with pytest.raises(WaitTimeoutError) as exc_info:
        synchronizer.wait_for_event(WaitCondition(lambda: False, "never got the thing"))
    elapsed = time.monotonic() - start

    error = exc_info.value
    assert error.description == "never got the thing"
    assert str(error).startswith("never got the thing")
    assert error.timeout == pytest.approx(FAST_TIMEOUT)
    assert FAST_TIMEOUT <= elapsed < FAST_TIMEOUT + 1.0


def test_timeout_error_is_an_assertion_error(synchronizer):
    with pytest.raises(AssertionError):
        synchronizer.wait_for_event(lambda: False, timeout=0.02)
    with pytest.raises(CqHarnessError):
        synchronizer.wait_for_event(lambda: False, timeout=0.02)


def test_bare_callable_uses_message(synchronizer):
    with pytest.raises(WaitTimeoutError, match="custom message"):
        synchronizer.wait_for_event(lambda: False, timeout=0.02, message="custom message")


def test_lazy_description_reads_state_at_timeout(synchronizer):
    state = {"count": 0}

    def bump():
        state["count"] += 1
        return False

    with pytest.raises(WaitTimeoutError) as exc_info:
        synchronizer.wait_for_event(
            WaitCondition(bump, lambda: f"count was {state['count']}"),
            timeout=0.05,
        )

    assert f"count was {state['count']}" in str(exc_info.value)
    assert state["count"] > 1


def test_predicate_errors_are_retried_then_chained(synchronizer):
    def broken():
        raise KeyError("missing")

    with pytest.raises(WaitTimeoutError) as exc_info:
        synchronizer.wait_for_event(WaitCondition(broken, "broken predicate"), timeout=0.05)

    assert isinstance(exc_info.value.__cause__, KeyError)


def test_predicate_error_then_success(synchronizer):
    attempts = []

    def flaky():
        attempts.append(1)
        if len(attempts) < 3:
            raise RuntimeError("not ready")
        return True

    synchronizer.wait_for_event(flaky, timeout=2.0)

    assert len(attempts) == 3


def test_wait_quietly_returns_bool(synchronizer):
    assert synchronizer.wait_quietly(lambda: True) is True
    assert synchronizer.wait_quietly(lambda: False, timeout=0.05) is False


def test_wait_for_value(synchronizer):
    values = iter(range(100))
    synchronizer.wait_for_value(lambda: next(values), 3, timeout=2.0)

    with pytest.raises(WaitTimeoutError, match="become 'x', last value 'y'"):
        synchronizer.wait_for_value(lambda: "y", "x", timeout=0.02)


def test_wait_multiple_reports_pending_conditions(synchronizer):
    done = WaitCondition(lambda: True, "done condition")
    pending = WaitCondition(lambda: False, "pending condition")

    synchronizer.wait_multiple([done, lambda: True], timeout=1.0)

    with pytest.raises(WaitTimeoutError) as exc_info:
        synchronizer.wait_multiple([done, pending], timeout=0.05)

    message = str(exc_info.value)
    assert "pending condition" in message
    assert "done condition" not in message


def test_defaults_come_from_config():
    config = WaitConfig(max_wait_time_ms=50, poll_interval_ms=5)
    synchronizer = EventSynchronizer(config)

    start = time.monotonic()
    with pytest.raises(WaitTimeoutError) as exc_info:
        synchronizer.wait_for_event(lambda: False)

    assert exc_info.value.timeout == pytest.approx(0.05)
    assert time.monotonic() - start < 1.0
    assert synchronizer.config is config


def test_poll_interval_is_respected():
    synchronizer = EventSynchronizer(WaitConfig(max_wait_time_ms=200, poll_interval_ms=50))
    calls = []

    synchronizer.wait_quietly(lambda: calls.append(1) and False)

    # One call up front plus roughly one per interval
    assert 3 <= len(calls) <= 7
