"""
Authentication Entry Point
==========================
The per-request hook the host calls for a protected operation.
"""

from typing import Optional

from .authorization import is_allowed
from .challenge import challenge, challenge_for, forbidden
from .config import OAuthConfig
from .directory.base import ConsumerDirectory
from .models import (
    Allow,
    Authenticated,
    GateResult,
    OAuthRequest,
    RejectCode,
    Unsigned,
)
from .operations import OperationRegistry
from .orchestrator import Authenticator
from .replay.guard import ReplayGuard

AUTH_REQUIRED = "This API call requires authentication."


class OAuthGate:
    """
    Authenticates a request and authorizes the targeted operation.

    Usage:
        gate = OAuthGate.create(directory, nonce_store, registry)
        result = await gate.authorize_service_call(request, "items.list")
        if isinstance(result, Halt):
            return result.to_response()
    """

    def __init__(self, authenticator: Authenticator, registry: OperationRegistry):
        self.authenticator = authenticator
        self.registry = registry

    @classmethod
    def create(
        cls,
        directory: ConsumerDirectory,
        nonce_store,
        registry: OperationRegistry,
        config: Optional[OAuthConfig] = None,
    ) -> "OAuthGate":
        config = config or OAuthConfig()
        guard = ReplayGuard(nonce_store, window_seconds=config.timestamp_window_seconds)
        return cls(Authenticator(directory, guard, config), registry)

    @property
    def directory(self) -> ConsumerDirectory:
        return self.authenticator.directory

    def _authentication_required(self, operation_id: str):
        meta = self.registry.operation_metadata(operation_id)
        return challenge(
            f"{meta['method']}: {meta['title']}\n\n{AUTH_REQUIRED}",
            code=RejectCode.AUTHENTICATION_REQUIRED,
        )

    async def authorize_service_call(self, request: OAuthRequest, operation_id: str) -> GateResult:
        """
        Decide on a request targeting ``operation_id``.

        Returns:
            ``Allow`` with the resolved identity (``None`` for unsigned
            requests to open operations), or the ``Halt`` response to send

        Raises:
            UnknownOperationError: if the operation is not registered
            DirectoryUnavailableError: if a store lookup fails
        """
        needs_auth = self.registry.operation_requires_auth(operation_id)
        outcome = await self.authenticator.authenticate(request)

        if isinstance(outcome, Unsigned):
            if needs_auth:
                return self._authentication_required(operation_id)
            return Allow(identity=None)

        if not isinstance(outcome, Authenticated):
            return challenge_for(outcome)

        if not await is_allowed(self.directory, self.registry, outcome.identity.consumer_id, operation_id):
            return forbidden()
        return Allow(identity=outcome.identity)
