"""
Signature Base String
=====================
Canonical serialization of method, URL and parameters (RFC 5849 section 3.4.1),
on top of ``oauthlib.oauth1.rfc5849.signature``.
"""

from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from oauthlib.oauth1.rfc5849 import signature as rfc5849

from ..models import ParamList


def base_string_uri(url: str, public_base_url: Optional[str] = None) -> str:
    """
    Normalize a request URL for the base string.

    Scheme and host are lowercased, default ports dropped, query and fragment
    removed. With ``public_base_url`` the scheme and host of that URL replace
    the ones of ``url``.

    Raises:
        ValueError: if the URL is not absolute
    """
    if public_base_url:
        _, _, path, query, fragment = urlsplit(url)
        scheme, netloc, _, _, _ = urlsplit(public_base_url)
        url = urlunsplit((scheme, netloc, path, query, fragment))
    return rfc5849.base_string_uri(url)


def normalize_parameters(params: ParamList) -> str:
    """Encode, sort by name then value, and join the parameters."""
    return rfc5849.normalize_parameters(params)


def signature_base_string(
    http_method: str,
    url: str,
    params: ParamList,
    public_base_url: Optional[str] = None,
) -> str:
    """
    Build the signature base string.

    Args:
        http_method: HTTP method of the request
        url: Absolute request URL
        params: Parameters without oauth_signature and realm
        public_base_url: Optional scheme/host override

    Returns:
        ``METHOD&encoded-uri&encoded-params``
    """
    return rfc5849.signature_base_string(
        http_method,
        base_string_uri(url, public_base_url),
        normalize_parameters(params),
    )
