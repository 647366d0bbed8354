"""
HTTP Directory
==============
Consumer directory served by a remote directory service over HTTP.
"""

import httpx
from typing import Any, Dict, Optional
from urllib.parse import quote
import structlog

from ..config import OAuthConfig
from ..errors import DirectoryUnavailableError
from ..models import Consumer, Token
from .base import ConsumerDirectory

logger = structlog.get_logger(__name__)


class HttpConsumerDirectory(ConsumerDirectory):
    """
    Client for the directory service.

    Endpoints:
    - GET /api/internal/oauth/consumers/{key}/
    - GET /api/internal/oauth/tokens/{token}/
    - GET /api/internal/oauth/consumers/{id}/permissions/{operation_id}/

    A 404 is a lookup miss. Transport errors and other non-2xx statuses
    raise ``DirectoryUnavailableError``.
    """

    def __init__(self, config: OAuthConfig = None, transport: httpx.AsyncBaseTransport = None):
        self.config = config or OAuthConfig.from_env()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self._get_client()
        return self

    async def __aexit__(self, *args):
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.directory_url,
                timeout=self.config.directory_timeout,
                headers=self._get_headers(),
                transport=self._transport,
            )
        return self._client

    def _get_headers(self) -> Dict[str, str]:
        return {
            "X-Internal-Secret": self.config.directory_secret,
            "Accept": "application/json",
        }

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _get(self, path: str) -> Optional[Dict[str, Any]]:
        client = await self._get_client()
        try:
            response = await client.get(path)
        except httpx.HTTPError as e:
            logger.error("directory_request_failed", path=path, error=str(e))
            raise DirectoryUnavailableError("Directory service unreachable", store="http", cause=e)

        if response.status_code == 404:
            return None
        if response.is_error:
            logger.error("directory_request_failed", path=path, status=response.status_code)
            raise DirectoryUnavailableError(
                f"Directory service answered {response.status_code}", store="http"
            )
        return response.json()

    async def lookup_consumer(self, consumer_key: str) -> Optional[Consumer]:
        data = await self._get(f"/api/internal/oauth/consumers/{quote(consumer_key, safe='')}/")
        if data is None:
            return None
        return Consumer(
            id=int(data["id"]),
            consumer_key=data["consumer_key"],
            consumer_secret=data["consumer_secret"],
            rsa_public_key=data.get("rsa_public_key"),
            title=data.get("title", ""),
        )

    async def resolve_access_token(self, consumer: Consumer, token: str) -> Optional[Token]:
        data = await self._get(f"/api/internal/oauth/tokens/{quote(token, safe='')}/")
        if data is None or data.get("token_type", "access") != "access":
            return None
        resolved = Token(
            token=data["token"],
            token_secret=data["token_secret"],
            consumer_id=int(data["consumer_id"]),
            user_id=data.get("user_id"),
            revoked=bool(data.get("revoked", False)),
        )
        return resolved if resolved.belongs_to(consumer) else None

    async def is_operation_permitted(self, consumer_id: int, operation_id: str) -> bool:
        data = await self._get(
            f"/api/internal/oauth/consumers/{consumer_id}/permissions/{quote(operation_id, safe='')}/"
        )
        return bool(data and data.get("allowed"))
