"""
Consumer Directory Interface
============================
Narrow lookup contract against the store holding consumers, tokens and permissions.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import Consumer, Token


class ConsumerDirectory(ABC):
    """
    Read-only view of registered consumers, their access tokens and the
    operations each consumer may invoke.

    Implementations raise ``DirectoryUnavailableError`` when the store cannot
    be reached; a lookup miss is ``None``/``False``, never an exception.
    """

    @abstractmethod
    async def lookup_consumer(self, consumer_key: str) -> Optional[Consumer]:
        """Resolve a consumer by its key."""

    @abstractmethod
    async def resolve_access_token(self, consumer: Consumer, token: str) -> Optional[Token]:
        """Resolve a valid access token owned by ``consumer``."""

    @abstractmethod
    async def is_operation_permitted(self, consumer_id: int, operation_id: str) -> bool:
        """Whether ``operation_id`` is in the consumer's permitted set."""
