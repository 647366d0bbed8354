"""
Authorization Gate
==================
Whether an authenticated consumer may invoke an operation.
"""

import structlog

from .directory.base import ConsumerDirectory
from .metrics import record_decision
from .operations import OperationRegistry

logger = structlog.get_logger(__name__)


async def is_allowed(
    directory: ConsumerDirectory,
    registry: OperationRegistry,
    consumer_id: int,
    operation_id: str,
) -> bool:
    """
    Operations without an auth requirement are always allowed; the rest only
    when listed in the consumer's permitted set.
    """
    if not registry.operation_requires_auth(operation_id):
        return True
    allowed = await directory.is_operation_permitted(consumer_id, operation_id)
    record_decision(allowed)
    if not allowed:
        logger.warning("oauth_operation_denied", consumer_id=consumer_id, operation_id=operation_id)
    return allowed
