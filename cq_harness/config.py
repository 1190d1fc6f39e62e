"""Wait configuration for cq_harness.

Defaults can be overridden through the environment (or a ``.env`` file):

    CQ_LISTENER_MAX_WAIT_TIME   default wait budget in milliseconds (20000)
    CQ_LISTENER_POLL_INTERVAL   delay between predicate polls in milliseconds (100)
"""

import os
import logging

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

WAIT_PROPERTY = "CQ_LISTENER_MAX_WAIT_TIME"
POLL_PROPERTY = "CQ_LISTENER_POLL_INTERVAL"

WAIT_DEFAULT_MS = 20 * 1000
POLL_DEFAULT_MS = 100


class WaitConfig(BaseModel):
    """Timing budget for listener waits."""

    max_wait_time_ms: int = Field(default=WAIT_DEFAULT_MS, gt=0, description="Default wait budget in milliseconds")
    poll_interval_ms: int = Field(default=POLL_DEFAULT_MS, gt=0, description="Delay between predicate polls in milliseconds")

    @property
    def max_wait_time(self) -> float:
        """Wait budget in seconds."""
        return self.max_wait_time_ms / 1000

    @property
    def poll_interval(self) -> float:
        """Poll interval in seconds."""
        return self.poll_interval_ms / 1000

    @classmethod
    def from_env(cls) -> "WaitConfig":
        """Build a config from the environment, loading ``.env`` first."""
        load_dotenv()
        values = {}
        max_wait = os.getenv(WAIT_PROPERTY)
        if max_wait:
            values["max_wait_time_ms"] = max_wait
        poll = os.getenv(POLL_PROPERTY)
        if poll:
            values["poll_interval_ms"] = poll
        config = cls(**values)
        logger.debug(
            f"Wait config: max_wait_time_ms={config.max_wait_time_ms}, "
            f"poll_interval_ms={config.poll_interval_ms}"
        )
        return config
