"""
Parameter Extraction
====================
Collects the OAuth parameters of a request from the Authorization header and
the query/body parameters.
"""

from collections import Counter
from typing import List, Optional

from .headers import OAUTH_SCHEME, has_oauth_prefix, parse_authorization_header
from .models import OAuthRequest, ParamList

# Never part of the signature base string
EXCLUDED_PARAMS = frozenset({"oauth_signature", "realm"})


def strip_params(params: ParamList) -> ParamList:
    """Remove oauth_signature and realm, keeping everything else in order."""
    return [(k, v) for k, v in params if k not in EXCLUDED_PARAMS]


def collect_params(request: OAuthRequest) -> ParamList:
    """
    All parameters taking part in signature computation.

    Header parameters come first, then query/body parameters. Names present
    in both sources are kept twice.
    """
    auth_header = request.authorization
    if has_oauth_prefix(auth_header):
        params = parse_authorization_header(auth_header) + list(request.params)
    else:
        params = list(request.params)
    return strip_params([(str(k), str(v)) for k, v in params])


def _first(params: ParamList, name: str) -> Optional[str]:
    for key, value in params:
        if key == name:
            return value
    return None


def oauth_param(request: OAuthRequest, name: str) -> Optional[str]:
    """
    Look up a single OAuth parameter.

    With an ``OAuth `` Authorization header the value comes from the header
    only, otherwise from the query/body parameters.
    """
    auth_header = request.authorization
    if has_oauth_prefix(auth_header):
        return _first(parse_authorization_header(auth_header), name)
    return _first(request.params, name)


def request_is_signed(request: OAuthRequest) -> bool:
    """
    True when the request asks for OAuth authentication.

    That is a non-empty oauth_signature parameter, or an Authorization header
    using the OAuth scheme.
    """
    if _first(request.params, "oauth_signature"):
        return True
    auth_header = request.authorization
    return bool(auth_header) and auth_header.startswith(OAUTH_SCHEME)


def duplicate_protocol_params(request: OAuthRequest) -> List[str]:
    """Names of oauth_* parameters supplied more than once, header and query combined."""
    auth_header = request.authorization
    params = list(request.params)
    if has_oauth_prefix(auth_header):
        params = parse_authorization_header(auth_header) + params
    counts = Counter(k for k, _ in params if k.startswith("oauth_"))
    return sorted(name for name, count in counts.items() if count > 1)
