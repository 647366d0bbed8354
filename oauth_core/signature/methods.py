"""
Signature Methods
=================
PLAINTEXT, HMAC-SHA1 and RSA-SHA1 signing and verification (RFC 5849 section 3.4).

The algorithms are oauthlib's; RSA goes through PyJWT and ``cryptography``
as oauthlib requires.
"""

import binascii
from typing import Optional

import structlog
from cryptography import x509
from cryptography.hazmat.primitives import serialization
from oauthlib.common import Request
from oauthlib.oauth1 import SIGNATURE_RSA, Client
from oauthlib.oauth1.rfc5849 import signature as rfc5849

from ..models import Consumer, ParamList, SignatureMethod
from .base_string import base_string_uri, signature_base_string

logger = structlog.get_logger(__name__)


def sign_plaintext(consumer_secret: str, token_secret: Optional[str]) -> str:
    """PLAINTEXT signatures are ``consumer_secret&token_secret``, each percent-encoded."""
    return rfc5849.sign_plaintext(consumer_secret, token_secret)


def sign_hmac_sha1(base_string: str, consumer_secret: str, token_secret: Optional[str]) -> str:
    """Base64 HMAC-SHA1 of the base string."""
    return rfc5849.sign_hmac_sha1(base_string, consumer_secret, token_secret)


def sign_rsa_sha1(base_string: str, private_key_pem: str) -> str:
    """Base64 RSASSA-PKCS1-v1_5 SHA-1 signature of the base string."""
    client = Client("", signature_method=SIGNATURE_RSA, rsa_key=private_key_pem)
    return rfc5849.sign_rsa_sha1_with_client(base_string, client)


def load_rsa_public_key(pem: str):
    """Load a PEM public key or the public key of a PEM X.509 certificate."""
    data = pem.encode("utf-8")
    if b"BEGIN CERTIFICATE" in data:
        return x509.load_pem_x509_certificate(data).public_key()
    return serialization.load_pem_public_key(data)


def _signed_request(
    signature: str,
    http_method: str,
    url: str,
    params: ParamList,
    public_base_url: Optional[str],
) -> Request:
    # oauthlib verifiers read uri, http_method, params and signature
    request = Request(base_string_uri(url, public_base_url), http_method=http_method)
    request.params = list(params)
    request.signature = signature
    return request


def compute_signature(
    method: SignatureMethod,
    http_method: str,
    url: str,
    params: ParamList,
    consumer_secret: str,
    token_secret: Optional[str] = None,
    rsa_private_key: Optional[str] = None,
    public_base_url: Optional[str] = None,
) -> str:
    """
    Sign a request.

    Args:
        method: Signature method
        http_method: HTTP method (GET, POST, etc.)
        url: Absolute request URL
        params: Parameters without oauth_signature and realm
        consumer_secret: Consumer shared secret
        token_secret: Token shared secret
        rsa_private_key: PEM private key, RSA-SHA1 only
        public_base_url: Optional scheme/host override

    Returns:
        The oauth_signature value
    """
    method = SignatureMethod(method)
    if method is SignatureMethod.PLAINTEXT:
        return sign_plaintext(consumer_secret, token_secret)
    base_string = signature_base_string(http_method, url, params, public_base_url)
    if method is SignatureMethod.HMAC_SHA1:
        return sign_hmac_sha1(base_string, consumer_secret, token_secret)
    if rsa_private_key is None:
        raise ValueError("rsa_private_key is required for RSA-SHA1")
    return sign_rsa_sha1(base_string, rsa_private_key)


def verify_signature(
    method: SignatureMethod,
    signature: str,
    http_method: str,
    url: str,
    params: ParamList,
    consumer: Consumer,
    token_secret: Optional[str],
    public_base_url: Optional[str] = None,
) -> bool:
    """
    Verify a request signature using constant-time comparison.

    Returns:
        True if the signature is valid
    """
    method = SignatureMethod(method)
    try:
        request = _signed_request(signature, http_method, url, params, public_base_url)
    except ValueError as e:
        # e.g. a Host header with an out-of-range port
        logger.warning("signature_url_unusable", error=str(e))
        return False

    if method is SignatureMethod.PLAINTEXT:
        match = rfc5849.verify_plaintext(request, consumer.consumer_secret, token_secret)
    elif method is SignatureMethod.HMAC_SHA1:
        match = rfc5849.verify_hmac_sha1(request, consumer.consumer_secret, token_secret)
    else:
        match = verify_rsa_sha1(request, consumer.rsa_public_key)

    if not match:
        logger.debug("signature_mismatch", method=method.value, consumer_id=consumer.id)
    return match


def verify_rsa_sha1(request: Request, public_key_pem: Optional[str]) -> bool:
    """
    RSA-SHA1 check against the consumer's PEM key or certificate.

    Missing keys and undecodable signatures fail verification.
    """
    if not public_key_pem:
        logger.warning("rsa_sha1_no_public_key")
        return False
    try:
        key = load_rsa_public_key(public_key_pem)
        return rfc5849.verify_rsa_sha1(request, key)
    except (ValueError, binascii.Error) as e:
        logger.warning("rsa_sha1_unusable_input", error=str(e))
        return False
