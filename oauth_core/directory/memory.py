"""
In-Memory Directory
===================
Dictionary-backed consumer directory for tests and single-process setups.
"""

from typing import Dict, Optional, Set

from ..models import Consumer, Token
from .base import ConsumerDirectory


class InMemoryDirectory(ConsumerDirectory):
    """Consumer directory held in process memory."""

    def __init__(self):
        self._consumers: Dict[str, Consumer] = {}
        self._tokens: Dict[str, Token] = {}
        self._permissions: Dict[int, Set[str]] = {}
        self._next_id = 1

    def add_consumer(
        self,
        consumer_key: str,
        consumer_secret: str,
        rsa_public_key: Optional[str] = None,
        title: str = "",
    ) -> Consumer:
        consumer = Consumer(
            id=self._next_id,
            consumer_key=consumer_key,
            consumer_secret=consumer_secret,
            rsa_public_key=rsa_public_key,
            title=title,
        )
        self._next_id += 1
        self._consumers[consumer_key] = consumer
        return consumer

    def add_token(
        self,
        consumer: Consumer,
        token: str,
        token_secret: str,
        user_id: Optional[int] = None,
        revoked: bool = False,
    ) -> Token:
        record = Token(
            token=token,
            token_secret=token_secret,
            consumer_id=consumer.id,
            user_id=user_id,
            revoked=revoked,
        )
        self._tokens[token] = record
        return record

    def grant(self, consumer: Consumer, *operation_ids: str) -> None:
        self._permissions.setdefault(consumer.id, set()).update(operation_ids)

    def revoke(self, token: str) -> None:
        self._tokens[token].revoked = True

    async def lookup_consumer(self, consumer_key: str) -> Optional[Consumer]:
        return self._consumers.get(consumer_key)

    async def resolve_access_token(self, consumer: Consumer, token: str) -> Optional[Token]:
        record = self._tokens.get(token)
        if record is None or not record.belongs_to(consumer):
            return None
        return record

    async def is_operation_permitted(self, consumer_id: int, operation_id: str) -> bool:
        return operation_id in self._permissions.get(consumer_id, ())
