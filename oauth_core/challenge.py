"""
Challenge Responses
===================
The 401/403 responses handed back to the host on the failure path.
"""

from typing import Optional

from .models import Halt, RejectCode, Rejected

WWW_AUTHENTICATE = "WWW-Authenticate"
OAUTH_CHALLENGE = 'OAuth realm=""'
NOT_AUTHORIZED_BODY = "You are not authorized to execute this API call.\n"


def challenge(reason: str, status: int = 401, code: Optional[RejectCode] = None) -> Halt:
    """A re-authentication challenge: reason plus newline, with WWW-Authenticate."""
    return Halt(
        status=status,
        body=f"{reason}\n",
        headers={WWW_AUTHENTICATE: OAUTH_CHALLENGE},
        code=code,
    )


def challenge_for(rejected: Rejected) -> Halt:
    return challenge(rejected.reason, rejected.status, rejected.code)


def forbidden() -> Halt:
    """403 for an authenticated consumer lacking the permission. Not a challenge."""
    return Halt(
        status=403,
        body=NOT_AUTHORIZED_BODY,
        code=RejectCode.UNAUTHORIZED_OPERATION,
    )
