"""
Request Signing
===============
Functions for creating signed OAuth requests, for outbound callers and tests.
"""

import time
import uuid
from typing import Dict, Optional

from .headers import build_authorization_header
from .models import ParamList, SignatureMethod
from .signature import compute_signature


def generate_nonce() -> str:
    """Generate a unique nonce for request signing."""
    return uuid.uuid4().hex


def create_signed_headers(
    consumer_key: str,
    consumer_secret: str,
    method: str,
    url: str,
    token: Optional[str] = None,
    token_secret: Optional[str] = None,
    params: Optional[ParamList] = None,
    signature_method: SignatureMethod = SignatureMethod.HMAC_SHA1,
    rsa_private_key: Optional[str] = None,
    timestamp: Optional[int] = None,
    nonce: Optional[str] = None,
    realm: Optional[str] = "",
) -> Dict[str, str]:
    """
    Create the Authorization header for a signed request.

    Args:
        consumer_key: Consumer key
        consumer_secret: Consumer secret
        method: HTTP method
        url: Absolute request URL
        token: Access token, if any
        token_secret: Access token secret
        params: Query and form-body parameters sent with the request
        signature_method: PLAINTEXT, HMAC-SHA1 or RSA-SHA1
        rsa_private_key: PEM private key for RSA-SHA1
        timestamp: Fixed timestamp (defaults to now)
        nonce: Fixed nonce (defaults to a random one)
        realm: Realm to announce; ``None`` omits it

    Returns:
        Dictionary of headers to include in the request
    """
    signature_method = SignatureMethod(signature_method)
    oauth_params = [
        ("oauth_consumer_key", consumer_key),
        ("oauth_signature_method", signature_method.value),
        ("oauth_timestamp", str(timestamp if timestamp is not None else int(time.time()))),
        ("oauth_nonce", nonce or generate_nonce()),
        ("oauth_version", "1.0"),
    ]
    if token is not None:
        oauth_params.append(("oauth_token", token))

    signature = compute_signature(
        signature_method,
        method,
        url,
        oauth_params + list(params or []),
        consumer_secret,
        token_secret,
        rsa_private_key=rsa_private_key,
    )
    oauth_params.append(("oauth_signature", signature))

    return {"Authorization": build_authorization_header(oauth_params, realm=realm)}
