"""
Redis Nonce Store
=================
Redis-backed nonce store using ``SET NX EX`` for atomic check-and-record.
"""

from redis.exceptions import RedisError
import structlog

from ..config import OAuthConfig
from ..errors import DirectoryUnavailableError
from ..models import Consumer, Token
from .base import NonceStore

logger = structlog.get_logger(__name__)


class RedisNonceStore(NonceStore):
    """
    Distributed nonce store.

    A nonce key is created only if absent and expires after the TTL, so
    concurrent presentations across service instances race on one key.
    """

    def __init__(self, redis_client, ttl_seconds: int = 600, prefix: str = "oauth:nonce"):
        """
        Args:
            redis_client: Async Redis client
            ttl_seconds: How long a nonce is remembered
            prefix: Key prefix
        """
        self.redis = redis_client
        self.ttl_seconds = ttl_seconds
        self.prefix = prefix

    @classmethod
    def from_config(cls, redis_client, config: OAuthConfig) -> "RedisNonceStore":
        return cls(redis_client, ttl_seconds=config.nonce_ttl_seconds)

    def get_key(self, consumer: Consumer, token: Token, nonce: str) -> str:
        return f"{self.prefix}:{consumer.id}:{token.token}:{nonce}"

    async def check_and_record(
        self,
        consumer: Consumer,
        token: Token,
        timestamp: int,
        nonce: str,
    ) -> bool:
        key = self.get_key(consumer, token, nonce)
        try:
            created = await self.redis.set(key, timestamp, nx=True, ex=self.ttl_seconds)
        except RedisError as e:
            logger.error("nonce_store_failed", error=str(e))
            raise DirectoryUnavailableError("Nonce store unreachable", store="redis", cause=e)

        if not created:
            logger.warning("replay_attack_detected", consumer_id=consumer.id, nonce=nonce[:8])
            return False
        return True
