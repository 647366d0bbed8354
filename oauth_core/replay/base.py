"""
Nonce Store Interface
=====================
Contract for the shared store that remembers consumed nonces.
"""

from abc import ABC, abstractmethod

from ..models import Consumer, Token


class NonceStore(ABC):
    """
    Remembers which (consumer, token, nonce) tuples have been presented.

    ``check_and_record`` must be atomic: of two concurrent calls with the
    same tuple exactly one returns True. A recorded nonce is remembered for
    at least ``ttl_seconds``.
    """

    ttl_seconds: int = 600

    @abstractmethod
    async def check_and_record(
        self,
        consumer: Consumer,
        token: Token,
        timestamp: int,
        nonce: str,
    ) -> bool:
        """
        Record a nonce if it was not seen before.

        Returns:
            True if the nonce is fresh, False if it was already used

        Raises:
            DirectoryUnavailableError: if the store cannot be reached
        """
