"""
Replay Guard
============
Timestamp freshness and nonce uniqueness per (consumer, token).
"""

import time
from typing import Optional
import structlog

from ..errors import ConfigurationError
from ..models import Consumer, Token
from .base import NonceStore

logger = structlog.get_logger(__name__)

# Configuration
DEFAULT_TIMESTAMP_WINDOW_SECONDS = 300  # 5 minutes

MISSING_TIMESTAMP_OR_NONCE = "Missing timestamp or nonce."
INVALID_TIMESTAMP = "Invalid timestamp."
TIMESTAMP_OUT_OF_RANGE = "Timestamp is out of range."
NONCE_ALREADY_USED = "Nonce already used."


def parse_timestamp(raw: Optional[str]) -> Optional[int]:
    """Parse an oauth_timestamp; None if it is not a non-negative integer."""
    if raw is None or not (raw.isascii() and raw.isdigit()):
        return None
    return int(raw)


def check_timestamp_skew(timestamp: int, window: int, now: float) -> bool:
    """True if the timestamp lies within ``window`` seconds of ``now``."""
    return abs(int(now) - timestamp) <= window


class ReplayGuard:
    """
    Decides whether a presentation is fresh and records its nonce.

    The freshness check runs first so stale requests never reach the store.

    Raises:
        ConfigurationError: if the store forgets nonces before their
            timestamps leave the window
    """

    def __init__(
        self,
        store: NonceStore,
        window_seconds: int = DEFAULT_TIMESTAMP_WINDOW_SECONDS,
        clock=time.time,
    ):
        if store.ttl_seconds < 2 * window_seconds:
            raise ConfigurationError(
                f"Nonce store TTL ({store.ttl_seconds}s) must be at least twice "
                f"the timestamp window ({window_seconds}s)"
            )
        self.store = store
        self.window_seconds = window_seconds
        self._clock = clock

    async def check_and_record_nonce(
        self,
        consumer: Consumer,
        token: Token,
        timestamp: Optional[str],
        nonce: Optional[str],
    ) -> Optional[str]:
        """
        Check a presentation and consume its nonce.

        Returns:
            None if accepted, otherwise the rejection reason
        """
        if not timestamp or not nonce:
            return MISSING_TIMESTAMP_OR_NONCE

        ts = parse_timestamp(timestamp)
        if ts is None:
            return INVALID_TIMESTAMP

        if not check_timestamp_skew(ts, self.window_seconds, self._clock()):
            logger.info(
                "oauth_timestamp_out_of_range",
                consumer_id=consumer.id,
                timestamp=ts,
                window=self.window_seconds,
            )
            return TIMESTAMP_OUT_OF_RANGE

        if not await self.store.check_and_record(consumer, token, ts, nonce):
            return NONCE_ALREADY_USED
        return None
