"""
Authentication Orchestrator
===========================
Decides whether a request is signed and, if so, runs consumer lookup, token
resolution, replay check and signature verification in that order.

Every failing step ends the run with a ``Rejected`` outcome carrying the
reason text shown to the client. Store outages are not outcomes: they
surface as ``DirectoryUnavailableError``.
"""

from typing import Optional
import structlog

from .config import OAuthConfig
from .directory.base import ConsumerDirectory
from .metrics import record_outcome
from .models import (
    Authenticated,
    AuthOutcome,
    Identity,
    OAuthRequest,
    Rejected,
    RejectCode,
    SignatureMethod,
    Unsigned,
)
from .params import collect_params, duplicate_protocol_params, oauth_param, request_is_signed
from .replay.guard import ReplayGuard
from .signature import verify_signature

logger = structlog.get_logger(__name__)

SUPPORTED_VERSION = "1.0"

CONSUMER_NOT_FOUND = "Consumer key not found."
MISSING_TOKEN = "Missing OAuth token."
TOKEN_NOT_FOUND = "Access token not found."
SIGNATURE_FAILED = "Signature verification failed."


class Authenticator:
    """
    Runs the OAuth 1.0 authentication of a single request.

    Holds no per-request state; one instance serves all requests.
    """

    def __init__(
        self,
        directory: ConsumerDirectory,
        replay_guard: ReplayGuard,
        config: Optional[OAuthConfig] = None,
    ):
        self.directory = directory
        self.replay_guard = replay_guard
        self.config = config or OAuthConfig()

    def _reject(self, reason: str, code: RejectCode, **context) -> Rejected:
        logger.info("oauth_request_rejected", code=code.value, **context)
        record_outcome("rejected", code.value)
        return Rejected(reason=reason, code=code, status=401)

    async def authenticate(self, request: OAuthRequest) -> AuthOutcome:
        """
        Authenticate a request.

        Returns:
            ``Unsigned`` when no OAuth credentials are present,
            ``Authenticated`` on success, ``Rejected`` otherwise

        Raises:
            DirectoryUnavailableError: if a store lookup fails
        """
        if not request_is_signed(request):
            record_outcome("unsigned")
            return Unsigned()

        if self.config.reject_duplicate_params:
            duplicates = duplicate_protocol_params(request)
            if duplicates:
                return self._reject(
                    f"Duplicate OAuth parameter: {duplicates[0]}",
                    RejectCode.DUPLICATE_PARAMETER,
                    params=duplicates,
                )

        version = oauth_param(request, "oauth_version")
        if version != SUPPORTED_VERSION:
            return self._reject(
                f"Unsupported OAuth version: {version if version is not None else ''}",
                RejectCode.UNSUPPORTED_VERSION,
            )

        consumer_key = oauth_param(request, "oauth_consumer_key")
        consumer = await self.directory.lookup_consumer(consumer_key) if consumer_key else None
        if consumer is None:
            return self._reject(CONSUMER_NOT_FOUND, RejectCode.CONSUMER_NOT_FOUND, consumer_key=consumer_key)

        log = logger.bind(consumer_id=consumer.id, consumer_key=consumer.consumer_key)

        token_value = oauth_param(request, "oauth_token")
        if token_value is None:
            return self._reject(MISSING_TOKEN, RejectCode.TOKEN_MISSING, consumer_id=consumer.id)
        token = await self.directory.resolve_access_token(consumer, token_value)
        if token is None:
            return self._reject(TOKEN_NOT_FOUND, RejectCode.TOKEN_NOT_FOUND, consumer_id=consumer.id)

        replay_reason = await self.replay_guard.check_and_record_nonce(
            consumer,
            token,
            oauth_param(request, "oauth_timestamp"),
            oauth_param(request, "oauth_nonce"),
        )
        if replay_reason is not None:
            return self._reject(replay_reason, RejectCode.REPLAY_REJECTED, consumer_id=consumer.id)

        method_name = oauth_param(request, "oauth_signature_method")
        try:
            method = SignatureMethod(method_name)
        except ValueError:
            return self._reject(
                f"Unsupported signature method: {method_name if method_name is not None else ''}",
                RejectCode.UNSUPPORTED_SIGNATURE_METHOD,
                consumer_id=consumer.id,
            )

        valid = verify_signature(
            method,
            oauth_param(request, "oauth_signature") or "",
            request.method,
            request.url,
            collect_params(request),
            consumer,
            token.token_secret,
            public_base_url=self.config.public_base_url,
        )
        if not valid:
            return self._reject(SIGNATURE_FAILED, RejectCode.SIGNATURE_INVALID, consumer_id=consumer.id)

        identity = Identity(
            consumer_id=consumer.id,
            user_id=token.user_id,
            consumer_key=consumer.consumer_key,
        )
        log.info("oauth_request_authenticated", user_id=token.user_id, method=method.value)
        record_outcome("authenticated")
        return Authenticated(consumer=consumer, token=token, identity=identity)
