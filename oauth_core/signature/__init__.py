"""
Signature Module
================
OAuth 1.0 base string construction and signature methods.
"""

from .base_string import base_string_uri, normalize_parameters, signature_base_string
from .methods import (
    compute_signature,
    load_rsa_public_key,
    sign_hmac_sha1,
    sign_plaintext,
    sign_rsa_sha1,
    verify_rsa_sha1,
    verify_signature,
)

__all__ = [
    # Base string
    "base_string_uri",
    "normalize_parameters",
    "signature_base_string",
    # Methods
    "compute_signature",
    "load_rsa_public_key",
    "sign_hmac_sha1",
    "sign_plaintext",
    "sign_rsa_sha1",
    "verify_rsa_sha1",
    "verify_signature",
]
