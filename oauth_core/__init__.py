"""
OAuth Core Library
==================
OAuth 1.0 request authentication and operation authorization for API services.
"""

__version__ = "0.1.0"

# Models
from oauth_core.models import (
    Allow,
    Authenticated,
    AuthOutcome,
    Consumer,
    GateResult,
    Halt,
    Identity,
    OAuthRequest,
    Rejected,
    RejectCode,
    SignatureMethod,
    Token,
    Unsigned,
)

# Configuration & errors
from oauth_core.config import OAuthConfig
from oauth_core.errors import (
    ConfigurationError,
    DirectoryUnavailableError,
    OAuthCoreError,
    UnknownOperationError,
)

# Parameters & signatures
from oauth_core.headers import build_authorization_header, parse_authorization_header
from oauth_core.params import collect_params, oauth_param, request_is_signed
from oauth_core.signature import compute_signature, signature_base_string, verify_signature
from oauth_core.client import create_signed_headers, generate_nonce

# Directory & replay protection
from oauth_core.directory import (
    ConsumerDirectory,
    HttpConsumerDirectory,
    InMemoryDirectory,
    SqlConsumerDirectory,
    SqlNonceStore,
)
from oauth_core.replay import NonceCache, NonceStore, RedisNonceStore, ReplayGuard

# Authentication & authorization
from oauth_core.operations import Operation, OperationRegistry
from oauth_core.orchestrator import Authenticator
from oauth_core.authorization import is_allowed
from oauth_core.challenge import challenge, forbidden
from oauth_core.gate import OAuthGate

# Host integration
from oauth_core.middleware import OAuthMiddleware, get_oauth_identity, require_oauth_identity

__all__ = [
    # Models
    "Allow",
    "Authenticated",
    "AuthOutcome",
    "Consumer",
    "GateResult",
    "Halt",
    "Identity",
    "OAuthRequest",
    "Rejected",
    "RejectCode",
    "SignatureMethod",
    "Token",
    "Unsigned",
    # Configuration & errors
    "OAuthConfig",
    "ConfigurationError",
    "DirectoryUnavailableError",
    "OAuthCoreError",
    "UnknownOperationError",
    # Parameters & signatures
    "build_authorization_header",
    "parse_authorization_header",
    "collect_params",
    "oauth_param",
    "request_is_signed",
    "compute_signature",
    "signature_base_string",
    "verify_signature",
    "create_signed_headers",
    "generate_nonce",
    # Directory & replay protection
    "ConsumerDirectory",
    "HttpConsumerDirectory",
    "InMemoryDirectory",
    "SqlConsumerDirectory",
    "SqlNonceStore",
    "NonceCache",
    "NonceStore",
    "RedisNonceStore",
    "ReplayGuard",
    # Authentication & authorization
    "Operation",
    "OperationRegistry",
    "Authenticator",
    "is_allowed",
    "challenge",
    "forbidden",
    "OAuthGate",
    # Host integration
    "OAuthMiddleware",
    "get_oauth_identity",
    "require_oauth_identity",
]
