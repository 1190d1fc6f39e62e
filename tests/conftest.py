"""
Common test fixtures for cq_harness tests.

Waits use short timeouts so timeout paths stay fast.
"""

import logging
from unittest.mock import Mock

import pytest

from cq_harness.config import WaitConfig
from cq_harness.core.event_bus import CqEventBus
from cq_harness.listener import CqQueryTestListener
from cq_harness.utils.event_synchronizer import EventSynchronizer

from .utils.factories import FAST_TIMEOUT, POLL_INTERVAL


@pytest.fixture
def wait_config():
    """A short wait budget for tests that exercise timeouts."""
    return WaitConfig(
        max_wait_time_ms=int(FAST_TIMEOUT * 1000),
        poll_interval_ms=int(POLL_INTERVAL * 1000),
    )


@pytest.fixture
def synchronizer(wait_config):
    """Create an EventSynchronizer with the fast config."""
    return EventSynchronizer(wait_config)


@pytest.fixture
def listener(wait_config):
    """Create a fresh listener for each test."""
    return CqQueryTestListener(cq_name="testCq", user_name="tester", config=wait_config)


@pytest.fixture
def event_bus(listener):
    """Create a bus with the default listener registered."""
    bus = CqEventBus()
    bus.register(listener)
    yield bus
    bus.remove_all_listeners()


@pytest.fixture
def mock_logger():
    """Create a mock logger for testing."""
    return Mock(spec=logging.Logger)
