"""
SQL Directory
=============
Consumer directory and nonce store on top of async SQLAlchemy.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import structlog

from ..config import OAuthConfig
from ..database import AsyncSessionLocal
from ..errors import DirectoryUnavailableError
from ..models import Consumer, Token
from ..replay.base import NonceStore
from .base import ConsumerDirectory
from .tables import ConsumerRecord, NonceRecord, PermissionRecord, TokenRecord

logger = structlog.get_logger(__name__)


class _SqlStore:
    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        self._session_factory = session_factory

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        return self._session_factory or AsyncSessionLocal()

    def _unavailable(self, operation: str, error: Exception) -> DirectoryUnavailableError:
        logger.error("sql_directory_failed", operation=operation, error=str(error))
        return DirectoryUnavailableError(f"{operation} failed", store="sql", cause=error)


class SqlConsumerDirectory(_SqlStore, ConsumerDirectory):
    """Reads consumers, access tokens and permissions from the database."""

    async def lookup_consumer(self, consumer_key: str) -> Optional[Consumer]:
        try:
            async with self.session_factory() as session:
                record = await session.scalar(
                    select(ConsumerRecord).where(ConsumerRecord.consumer_key == consumer_key)
                )
        except SQLAlchemyError as e:
            raise self._unavailable("lookup_consumer", e)
        return record.to_consumer() if record else None

    async def resolve_access_token(self, consumer: Consumer, token: str) -> Optional[Token]:
        try:
            async with self.session_factory() as session:
                record = await session.scalar(
                    select(TokenRecord).where(
                        TokenRecord.token == token,
                        TokenRecord.token_type == "access",
                    )
                )
        except SQLAlchemyError as e:
            raise self._unavailable("resolve_access_token", e)
        if record is None:
            return None
        resolved = record.to_token()
        return resolved if resolved.belongs_to(consumer) else None

    async def is_operation_permitted(self, consumer_id: int, operation_id: str) -> bool:
        try:
            async with self.session_factory() as session:
                found = await session.scalar(
                    select(PermissionRecord.id).where(
                        PermissionRecord.consumer_id == consumer_id,
                        PermissionRecord.operation_id == operation_id,
                    ).limit(1)
                )
        except SQLAlchemyError as e:
            raise self._unavailable("is_operation_permitted", e)
        return found is not None


class SqlNonceStore(_SqlStore, NonceStore):
    """
    Nonce store relying on the (consumer, token, nonce) unique constraint.

    Of two concurrent inserts of the same tuple the database lets one commit.
    """

    def __init__(
        self,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        ttl_seconds: int = 600,
    ):
        super().__init__(session_factory)
        self.ttl_seconds = ttl_seconds

    @classmethod
    def from_config(
        cls,
        config: OAuthConfig,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
    ) -> "SqlNonceStore":
        return cls(session_factory, ttl_seconds=config.nonce_ttl_seconds)

    async def check_and_record(
        self,
        consumer: Consumer,
        token: Token,
        timestamp: int,
        nonce: str,
    ) -> bool:
        try:
            async with self.session_factory() as session:
                session.add(NonceRecord(
                    consumer_id=consumer.id,
                    token=token.token,
                    nonce=nonce,
                    timestamp=timestamp,
                ))
                try:
                    await session.commit()
                except IntegrityError:
                    await session.rollback()
                    logger.warning("replay_attack_detected", consumer_id=consumer.id, nonce=nonce[:8])
                    return False
        except SQLAlchemyError as e:
            raise self._unavailable("check_and_record", e)
        return True

    async def prune_expired(self, ttl_seconds: Optional[int] = None) -> int:
        """Delete nonces first seen more than ``ttl_seconds`` (default: the store TTL) ago."""
        ttl_seconds = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        cutoff = datetime.now(timezone.utc) - timedelta(seconds=ttl_seconds)
        try:
            async with self.session_factory() as session:
                result = await session.execute(
                    delete(NonceRecord).where(NonceRecord.first_seen < cutoff)
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise self._unavailable("prune_expired", e)
        logger.info("nonces_pruned", count=result.rowcount)
        return result.rowcount
