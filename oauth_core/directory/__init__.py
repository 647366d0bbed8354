"""
Consumer Directory
==================
Lookups of consumers, access tokens and permissions.
"""

from .base import ConsumerDirectory
from .http import HttpConsumerDirectory
from .memory import InMemoryDirectory
from .sql import SqlConsumerDirectory, SqlNonceStore

__all__ = [
    "ConsumerDirectory",
    "HttpConsumerDirectory",
    "InMemoryDirectory",
    "SqlConsumerDirectory",
    "SqlNonceStore",
]
