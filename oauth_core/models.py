"""
OAuth Models
============
Data models and enums for OAuth 1.0 request authentication.
"""

from typing import Dict, List, Optional, Tuple, Union
from dataclasses import dataclass, field
from enum import Enum

# Ordered (name, value) pairs; names may repeat.
ParamList = List[Tuple[str, str]]


class SignatureMethod(str, Enum):
    """Supported OAuth 1.0 signature methods."""
    PLAINTEXT = "PLAINTEXT"
    HMAC_SHA1 = "HMAC-SHA1"
    RSA_SHA1 = "RSA-SHA1"


class RejectCode(str, Enum):
    """Reasons for rejecting a request."""
    UNSUPPORTED_VERSION = "unsupported_version"
    DUPLICATE_PARAMETER = "duplicate_parameter"
    CONSUMER_NOT_FOUND = "consumer_not_found"
    TOKEN_MISSING = "token_missing"
    TOKEN_NOT_FOUND = "token_not_found"
    REPLAY_REJECTED = "replay_rejected"
    UNSUPPORTED_SIGNATURE_METHOD = "unsupported_signature_method"
    SIGNATURE_INVALID = "signature_invalid"
    UNAUTHORIZED_OPERATION = "unauthorized_operation"
    AUTHENTICATION_REQUIRED = "authentication_required"


@dataclass
class Consumer:
    """A registered API client."""
    id: int
    consumer_key: str
    consumer_secret: str
    rsa_public_key: Optional[str] = None
    title: str = ""


@dataclass
class Token:
    """An access token delegated to a consumer on behalf of a user."""
    token: str
    token_secret: str
    consumer_id: int
    user_id: Optional[int] = None
    revoked: bool = False

    def belongs_to(self, consumer: Consumer) -> bool:
        return not self.revoked and self.consumer_id == consumer.id


@dataclass
class OAuthRequest:
    """Request descriptor handed over by the host framework."""
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    params: ParamList = field(default_factory=list)

    @property
    def authorization(self) -> Optional[str]:
        """The Authorization header, looked up case-insensitively."""
        for name, value in self.headers.items():
            if name.lower() == "authorization":
                return value
        return None


@dataclass(frozen=True)
class Identity:
    """Who is calling: the consumer and the user it acts for."""
    consumer_id: int
    user_id: Optional[int]
    consumer_key: str = ""


# Authentication outcomes

@dataclass(frozen=True)
class Unsigned:
    """The request carries no OAuth credentials at all."""


@dataclass(frozen=True)
class Authenticated:
    consumer: Consumer
    token: Token
    identity: Identity


@dataclass(frozen=True)
class Rejected:
    reason: str
    code: RejectCode
    status: int = 401


AuthOutcome = Union[Unsigned, Authenticated, Rejected]


# Entry point results

@dataclass(frozen=True)
class Allow:
    """Let the request through, optionally with a resolved identity."""
    identity: Optional[Identity] = None


@dataclass(frozen=True)
class Halt:
    """Stop the request and answer with this response."""
    status: int
    body: str
    headers: Dict[str, str] = field(default_factory=dict)
    code: Optional[RejectCode] = None

    def to_response(self):
        from starlette.responses import PlainTextResponse

        return PlainTextResponse(
            self.body, status_code=self.status, headers=self.headers
        )


GateResult = Union[Allow, Halt]
