"""
OAuth Middleware for Starlette/FastAPI Services

Authenticates requests to registered operations and attaches the resolved
identity to ``request.state``.

Usage:
    from oauth_core import OAuthGate, OAuthMiddleware, OperationRegistry, get_oauth_identity

    registry = OperationRegistry()
    registry.register("items.list", "GET", "List items", path="/items")
    gate = OAuthGate.create(SqlConsumerDirectory(), SqlNonceStore(), registry)

    app.add_middleware(OAuthMiddleware, gate=gate)

    @app.get("/items")
    async def list_items(identity: Identity = Depends(require_oauth_identity)):
        ...
"""

from typing import Optional, Set
from urllib.parse import parse_qsl
from fastapi import HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware
import structlog

from .challenge import OAUTH_CHALLENGE, WWW_AUTHENTICATE
from .config import OAuthConfig
from .errors import DirectoryUnavailableError, create_unavailable_response
from .gate import AUTH_REQUIRED, OAuthGate
from .models import Halt, Identity, OAuthRequest

logger = structlog.get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


async def build_oauth_request(request: Request) -> OAuthRequest:
    """Turn a Starlette request into the descriptor the gate works on."""
    params = parse_qsl(request.url.query, keep_blank_values=True)
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPE):
        body = await request.body()
        params += parse_qsl(body.decode("utf-8", errors="replace"), keep_blank_values=True)
    return OAuthRequest(
        method=request.method,
        url=str(request.url),
        headers=dict(request.headers),
        params=params,
    )


class OAuthMiddleware(BaseHTTPMiddleware):
    """
    Runs the OAuth gate for requests routed to a registered operation.

    Unregistered paths, skip paths and CORS preflights pass through untouched.
    """

    def __init__(
        self,
        app,
        gate: OAuthGate,
        config: OAuthConfig = None,
        skip_paths: Set[str] = None,
    ):
        super().__init__(app)
        self.gate = gate
        self.config = config or gate.authenticator.config
        self.skip_paths = skip_paths or self.config.skip_paths

    async def dispatch(self, request: Request, call_next):
        path = request.url.path

        if any(path == p or path.startswith(p.rstrip("/") + "/") for p in self.skip_paths):
            return await call_next(request)

        if request.method == "OPTIONS":
            return await call_next(request)

        operation_id = self.gate.registry.resolve(request.method, path)
        if operation_id is None:
            return await call_next(request)

        oauth_request = await build_oauth_request(request)
        try:
            result = await self.gate.authorize_service_call(oauth_request, operation_id)
        except DirectoryUnavailableError as e:
            return create_unavailable_response(log_message=str(e))

        if isinstance(result, Halt):
            logger.info(
                "oauth_request_halted",
                path=path,
                operation_id=operation_id,
                status=result.status,
                code=result.code.value if result.code else None,
            )
            return result.to_response()

        request.state.oauth_identity = result.identity
        return await call_next(request)


def get_oauth_identity(request: Request) -> Optional[Identity]:
    """
    Dependency returning the OAuth identity, or None for unsigned requests.

    Usage:
        @app.get("/v1/resource")
        async def get_resource(identity: Optional[Identity] = Depends(get_oauth_identity)):
            ...
    """
    return getattr(request.state, "oauth_identity", None)


def require_oauth_identity(request: Request) -> Identity:
    """
    Dependency that requires an authenticated OAuth identity.
    Raises 401 with an OAuth challenge if there is none.
    """
    identity = get_oauth_identity(request)
    if identity is None:
        raise HTTPException(
            status_code=401,
            detail=AUTH_REQUIRED,
            headers={WWW_AUTHENTICATE: OAUTH_CHALLENGE},
        )
    return identity
