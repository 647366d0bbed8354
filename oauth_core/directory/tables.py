"""
Directory Tables
================
SQLAlchemy models for consumers, tokens, nonces and permissions.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ..database import Base
from ..models import Consumer, Token


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ConsumerRecord(Base):
    """A registered consumer application."""

    __tablename__ = "oauth_application_registry"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    consumer_key: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    consumer_secret: Mapped[str] = mapped_column(String(255), nullable=False)
    rsa_public_key: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    def to_consumer(self) -> Consumer:
        return Consumer(
            id=self.id,
            consumer_key=self.consumer_key,
            consumer_secret=self.consumer_secret,
            rsa_public_key=self.rsa_public_key,
            title=self.title,
        )


class TokenRecord(Base):
    """A request or access token issued to a consumer."""

    __tablename__ = "oauth_application_token"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    consumer_id: Mapped[int] = mapped_column(
        ForeignKey("oauth_application_registry.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    token: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    token_secret: Mapped[str] = mapped_column(String(255), nullable=False)
    token_type: Mapped[str] = mapped_column(String(16), nullable=False, default="access")
    revoked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def to_token(self) -> Token:
        return Token(
            token=self.token,
            token_secret=self.token_secret,
            consumer_id=self.consumer_id,
            user_id=self.user_id,
            revoked=self.revoked,
        )


class NonceRecord(Base):
    """A consumed nonce; the unique constraint makes recording atomic."""

    __tablename__ = "oauth_application_nonce"
    __table_args__ = (
        UniqueConstraint("consumer_id", "token", "nonce", name="uq_oauth_nonce"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    consumer_id: Mapped[int] = mapped_column(Integer, nullable=False)
    token: Mapped[str] = mapped_column(String(255), nullable=False)
    nonce: Mapped[str] = mapped_column(String(255), nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    first_seen: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)


class PermissionRecord(Base):
    """An operation a consumer may invoke."""

    __tablename__ = "oauth_application_perm"
    __table_args__ = (
        UniqueConstraint("consumer_id", "operation_id", name="uq_oauth_perm"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    consumer_id: Mapped[int] = mapped_column(
        ForeignKey("oauth_application_registry.id", ondelete="CASCADE"), nullable=False
    )
    operation_id: Mapped[str] = mapped_column(String(255), nullable=False)
