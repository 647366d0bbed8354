"""
Nonce Cache
===========
In-memory nonce store for replay protection.
"""

import threading
import time
from typing import Dict, Tuple
import structlog

from ..config import OAuthConfig
from ..models import Consumer, Token
from .base import NonceStore

logger = structlog.get_logger(__name__)


class NonceCache(NonceStore):
    """
    In-memory nonce cache for replay protection.

    Only safe within one process. In production, use Redis or the SQL store.
    """

    def __init__(self, ttl_seconds: int = 600, clock=time.time):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: Dict[Tuple[int, str, str], float] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: OAuthConfig, clock=time.time) -> "NonceCache":
        return cls(ttl_seconds=config.nonce_ttl_seconds, clock=clock)

    async def check_and_record(
        self,
        consumer: Consumer,
        token: Token,
        timestamp: int,
        nonce: str,
    ) -> bool:
        key = (consumer.id, token.token, nonce)
        with self._lock:
            self._cleanup()
            if key in self._cache:
                logger.warning("replay_attack_detected", consumer_id=consumer.id, nonce=nonce[:8])
                return False
            self._cache[key] = self._clock()
            return True

    def __len__(self) -> int:
        return len(self._cache)

    def _cleanup(self) -> None:
        """Remove expired nonces."""
        current_time = self._clock()
        expired = [
            key for key, seen in self._cache.items()
            if current_time - seen > self.ttl_seconds
        ]
        for key in expired:
            del self._cache[key]
