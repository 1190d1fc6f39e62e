"""
Tests for WaitConfig defaults and environment overrides.
"""

import pytest
from pydantic import ValidationError

from cq_harness.config import POLL_PROPERTY, WAIT_PROPERTY, WaitConfig
from cq_harness.listener import CqQueryTestListener


@pytest.fixture
def clean_env(monkeypatch):
    """Remove any wait settings inherited from the environment."""
    monkeypatch.delenv(WAIT_PROPERTY, raising=False)
    monkeypatch.delenv(POLL_PROPERTY, raising=False)
    return monkeypatch


def test_defaults():
    config = WaitConfig()

    assert config.max_wait_time_ms == 20000
    assert config.max_wait_time == 20.0
    assert config.poll_interval_ms == 100
    assert config.poll_interval == 0.1


def test_from_env_defaults(clean_env):
    config = WaitConfig.from_env()

    assert config.max_wait_time_ms == 20000


def test_from_env_overrides(clean_env):
    clean_env.setenv(WAIT_PROPERTY, "1500")
    clean_env.setenv(POLL_PROPERTY, "25")

    config = WaitConfig.from_env()

    assert config.max_wait_time == 1.5
    assert config.poll_interval == 0.025


def test_invalid_values_rejected(clean_env):
    with pytest.raises(ValidationError):
        WaitConfig(poll_interval_ms=0)

    clean_env.setenv(WAIT_PROPERTY, "soon")
    with pytest.raises(ValidationError):
        WaitConfig.from_env()


def test_listener_uses_env_config(clean_env):
    clean_env.setenv(WAIT_PROPERTY, "40")

    listener = CqQueryTestListener(cq_name="envCq")

    assert listener.synchronizer.config.max_wait_time_ms == 40
