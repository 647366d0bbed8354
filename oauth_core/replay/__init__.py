"""
Replay Protection
=================
Nonce stores and the replay guard.
"""

from .base import NonceStore
from .guard import (
    ReplayGuard,
    check_timestamp_skew,
    parse_timestamp,
    DEFAULT_TIMESTAMP_WINDOW_SECONDS,
    NONCE_ALREADY_USED,
    TIMESTAMP_OUT_OF_RANGE,
)
from .memory import NonceCache
from .redis_store import RedisNonceStore

__all__ = [
    "NonceStore",
    "ReplayGuard",
    "check_timestamp_skew",
    "parse_timestamp",
    "DEFAULT_TIMESTAMP_WINDOW_SECONDS",
    "NONCE_ALREADY_USED",
    "TIMESTAMP_OUT_OF_RANGE",
    "NonceCache",
    "RedisNonceStore",
]
