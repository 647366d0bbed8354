"""
Authorization Header
====================
Parsing and building of ``Authorization: OAuth ...`` headers.

Tokenizing and RFC 3986 escaping come from ``oauthlib.oauth1.rfc5849.utils``.
``utils.parse_authorization_header`` folds the pairs into a dict, so repeated
names would be lost; the header is split with ``utils.parse_http_list``
instead and every pair is kept.
"""

from typing import Iterable, Optional, Tuple

from oauthlib.oauth1.rfc5849 import utils

from .models import ParamList

OAUTH_SCHEME = "OAuth"
OAUTH_HEADER_PREFIX = "OAuth "


def percent_encode(value: str) -> str:
    """RFC 3986 percent encoding as required by OAuth 1.0."""
    return utils.escape(str(value))


def has_oauth_prefix(auth_header: Optional[str]) -> bool:
    """True if the header carries parameters we can decode."""
    return bool(auth_header) and auth_header.startswith(OAUTH_HEADER_PREFIX)


def parse_authorization_header(auth_header: str) -> ParamList:
    """
    Parse an OAuth Authorization header into ordered parameters.

    Both names and values are percent-decoded. Pairs are kept in header
    order and repeated names are preserved.

    Raises:
        ValueError: if the header does not start with ``OAuth ``
    """
    if not has_oauth_prefix(auth_header):
        raise ValueError("Not an OAuth authorization header")

    params: ParamList = []
    for item in utils.parse_http_list(auth_header[len(OAUTH_HEADER_PREFIX):]):
        if "=" not in item:
            continue
        key, value = item.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        params.append((utils.unescape(key.strip()), utils.unescape(value)))
    return params


def build_authorization_header(
    params: Iterable[Tuple[str, str]],
    realm: Optional[str] = "",
) -> str:
    """
    Build an ``Authorization`` header value from OAuth parameters.

    Args:
        params: oauth_* parameters including oauth_signature
        realm: Realm to announce; ``None`` omits it

    Returns:
        Header value, e.g. ``OAuth realm="", oauth_consumer_key="ck1", ...``
    """
    parts = []
    if realm is not None:
        parts.append(f'realm="{percent_encode(realm)}"')
    for key, value in params:
        parts.append(f'{percent_encode(key)}="{percent_encode(value)}"')
    return OAUTH_HEADER_PREFIX + ", ".join(parts)
