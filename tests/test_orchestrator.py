"""
Tests for the authentication state machine.
"""

import asyncio
import pytest

from oauth_core.client import create_signed_headers
from oauth_core.config import OAuthConfig
from oauth_core.errors import DirectoryUnavailableError
from oauth_core.headers import build_authorization_header
from oauth_core.models import (
    Authenticated,
    OAuthRequest,
    Rejected,
    RejectCode,
    Unsigned,
)
from oauth_core.orchestrator import Authenticator
from oauth_core.replay.guard import ReplayGuard
from oauth_core.signature import sign_hmac_sha1, signature_base_string

NOW = 1680000000
URL = "https://api.example.com/items"


def signed_request(
    method="GET",
    url=URL,
    consumer_key="ck1",
    consumer_secret="cs1",
    token="tk1",
    token_secret="ts1",
    signature_method="HMAC-SHA1",
    nonce="abc123",
    timestamp=NOW,
    params=None,
):
    headers = create_signed_headers(
        consumer_key,
        consumer_secret,
        method,
        url,
        token=token,
        token_secret=token_secret,
        params=params,
        signature_method=signature_method,
        timestamp=timestamp,
        nonce=nonce,
    )
    return OAuthRequest(method=method, url=url, headers=headers, params=list(params or []))


def header_request(pairs, params=None):
    return OAuthRequest(
        method="GET",
        url=URL,
        headers={"Authorization": build_authorization_header(pairs)},
        params=list(params or []),
    )


BASE_PAIRS = [
    ("oauth_consumer_key", "ck1"),
    ("oauth_token", "tk1"),
    ("oauth_signature_method", "HMAC-SHA1"),
    ("oauth_timestamp", str(NOW)),
    ("oauth_nonce", "abc123"),
    ("oauth_version", "1.0"),
]


def with_pair(pairs, name, value):
    return [(k, value if k == name else v) for k, v in pairs]


def without(pairs, name):
    return [(k, v) for k, v in pairs if k != name]


class TestUnsigned:
    """Requests without OAuth credentials."""

    @pytest.mark.asyncio
    async def test_plain_request(self, authenticator):
        outcome = await authenticator.authenticate(
            OAuthRequest(method="GET", url=URL, params=[("q", "1")])
        )

        assert outcome == Unsigned()

    @pytest.mark.asyncio
    async def test_bearer_request(self, authenticator):
        outcome = await authenticator.authenticate(
            OAuthRequest(method="GET", url=URL, headers={"Authorization": "Bearer abc"})
        )

        assert isinstance(outcome, Unsigned)


class TestAuthenticated:
    """Successful authentication."""

    @pytest.mark.asyncio
    async def test_hmac_sha1_end_to_end(self, authenticator, consumer):
        outcome = await authenticator.authenticate(signed_request())

        assert isinstance(outcome, Authenticated)
        assert outcome.identity.consumer_id == consumer.id
        assert outcome.identity.user_id == 42

    @pytest.mark.asyncio
    async def test_hand_computed_signature(self, authenticator, consumer):
        """The signature a client computes over the canonical base string verifies."""
        base = signature_base_string("GET", URL, BASE_PAIRS)
        sig = sign_hmac_sha1(base, "cs1", "ts1")

        outcome = await authenticator.authenticate(
            header_request(BASE_PAIRS + [("oauth_signature", sig)])
        )

        assert isinstance(outcome, Authenticated)
        assert outcome.identity.user_id == 42

    @pytest.mark.asyncio
    async def test_plaintext_end_to_end(self, authenticator):
        pairs = with_pair(BASE_PAIRS, "oauth_signature_method", "PLAINTEXT")

        outcome = await authenticator.authenticate(
            header_request(pairs + [("oauth_signature", "cs1&ts1")])
        )

        assert isinstance(outcome, Authenticated)

    @pytest.mark.asyncio
    async def test_query_parameter_signing(self, authenticator):
        """OAuth parameters may travel in the query string instead of the header."""
        params = [("page", "2")] + BASE_PAIRS
        sig = sign_hmac_sha1(signature_base_string("GET", URL, params), "cs1", "ts1")

        outcome = await authenticator.authenticate(
            OAuthRequest(method="GET", url=URL + "?page=2", params=params + [("oauth_signature", sig)])
        )

        assert isinstance(outcome, Authenticated)

    @pytest.mark.asyncio
    async def test_realm_does_not_affect_signature(self, authenticator):
        base = signature_base_string("GET", URL, BASE_PAIRS)
        sig = sign_hmac_sha1(base, "cs1", "ts1")
        header = build_authorization_header(BASE_PAIRS + [("oauth_signature", sig)], realm="Photos")

        outcome = await authenticator.authenticate(
            OAuthRequest(method="GET", url=URL, headers={"Authorization": header})
        )

        assert isinstance(outcome, Authenticated)


class TestRejected:
    """Every rejection carries status 401 and a reason."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("version", ["2.0", "1.0a", ""])
    async def test_unsupported_version(self, authenticator, version):
        pairs = with_pair(BASE_PAIRS, "oauth_version", version)

        outcome = await authenticator.authenticate(header_request(pairs + [("oauth_signature", "x")]))

        assert isinstance(outcome, Rejected)
        assert outcome.status == 401
        assert outcome.code is RejectCode.UNSUPPORTED_VERSION
        assert outcome.reason == f"Unsupported OAuth version: {version}"

    @pytest.mark.asyncio
    async def test_missing_version(self, authenticator):
        outcome = await authenticator.authenticate(
            header_request(without(BASE_PAIRS, "oauth_version") + [("oauth_signature", "x")])
        )

        assert outcome.code is RejectCode.UNSUPPORTED_VERSION

    @pytest.mark.asyncio
    async def test_unknown_consumer(self, authenticator):
        outcome = await authenticator.authenticate(signed_request(consumer_key="unknown"))

        assert outcome == Rejected("Consumer key not found.", RejectCode.CONSUMER_NOT_FOUND, 401)

    @pytest.mark.asyncio
    async def test_missing_consumer_key(self, authenticator):
        outcome = await authenticator.authenticate(
            header_request(without(BASE_PAIRS, "oauth_consumer_key") + [("oauth_signature", "x")])
        )

        assert outcome.reason == "Consumer key not found."

    @pytest.mark.asyncio
    async def test_missing_token(self, authenticator):
        outcome = await authenticator.authenticate(
            header_request(without(BASE_PAIRS, "oauth_token") + [("oauth_signature", "x")])
        )

        assert outcome == Rejected("Missing OAuth token.", RejectCode.TOKEN_MISSING, 401)

    @pytest.mark.asyncio
    async def test_unknown_token(self, authenticator):
        outcome = await authenticator.authenticate(signed_request(token="nope"))

        assert outcome == Rejected("Access token not found.", RejectCode.TOKEN_NOT_FOUND, 401)

    @pytest.mark.asyncio
    async def test_revoked_token(self, authenticator, directory):
        directory.revoke("tk1")

        outcome = await authenticator.authenticate(signed_request())

        assert outcome.reason == "Access token not found."

    @pytest.mark.asyncio
    async def test_token_of_other_consumer(self, authenticator, directory):
        other = directory.add_consumer("ck2", "cs2")
        directory.add_token(other, "tk2", "ts2", user_id=7)

        outcome = await authenticator.authenticate(signed_request(token="tk2", token_secret="ts2"))

        assert outcome.reason == "Access token not found."

    @pytest.mark.asyncio
    async def test_bad_signature(self, authenticator):
        outcome = await authenticator.authenticate(signed_request(consumer_secret="wrong"))

        assert outcome == Rejected("Signature verification failed.", RejectCode.SIGNATURE_INVALID, 401)

    @pytest.mark.asyncio
    async def test_unknown_signature_method(self, authenticator):
        pairs = with_pair(BASE_PAIRS, "oauth_signature_method", "HMAC-MD5")

        outcome = await authenticator.authenticate(header_request(pairs + [("oauth_signature", "x")]))

        assert outcome.code is RejectCode.UNSUPPORTED_SIGNATURE_METHOD
        assert outcome.reason == "Unsupported signature method: HMAC-MD5"

    @pytest.mark.asyncio
    async def test_stale_timestamp(self, authenticator):
        outcome = await authenticator.authenticate(signed_request(timestamp=NOW - 3600))

        assert outcome.code is RejectCode.REPLAY_REJECTED
        assert outcome.reason == "Timestamp is out of range."

    @pytest.mark.asyncio
    async def test_non_ascii_timestamp(self, authenticator):
        """A superscript digit in oauth_timestamp is an invalid timestamp, not a crash."""
        pairs = with_pair(BASE_PAIRS, "oauth_timestamp", "\u00b2")

        outcome = await authenticator.authenticate(header_request(pairs + [("oauth_signature", "x")]))

        assert outcome == Rejected("Invalid timestamp.", RejectCode.REPLAY_REJECTED, 401)

    @pytest.mark.asyncio
    async def test_duplicate_protocol_parameter(self, authenticator):
        """The same oauth_* name in header and query is refused."""
        request = signed_request()
        request.params.append(("oauth_token", "tk1"))

        outcome = await authenticator.authenticate(request)

        assert outcome.code is RejectCode.DUPLICATE_PARAMETER
        assert outcome.reason == "Duplicate OAuth parameter: oauth_token"

    @pytest.mark.asyncio
    async def test_duplicates_allowed_when_configured(self, directory, nonce_cache):
        authenticator = Authenticator(
            directory,
            ReplayGuard(nonce_cache, clock=lambda: NOW),
            OAuthConfig(reject_duplicate_params=False),
        )
        request = signed_request()
        request.params.append(("oauth_token", "tk1"))

        outcome = await authenticator.authenticate(request)

        # The extra query copy changes the base string
        assert outcome.code is RejectCode.SIGNATURE_INVALID


class TestReplay:
    """Nonce reuse across authentications."""

    @pytest.mark.asyncio
    async def test_second_presentation_rejected(self, authenticator):
        request = signed_request()

        first = await authenticator.authenticate(request)
        second = await authenticator.authenticate(request)

        assert isinstance(first, Authenticated)
        assert second == Rejected("Nonce already used.", RejectCode.REPLAY_REJECTED, 401)

    @pytest.mark.asyncio
    async def test_concurrent_presentations(self, authenticator):
        request = signed_request()

        outcomes = await asyncio.gather(
            authenticator.authenticate(request),
            authenticator.authenticate(request),
        )

        assert sum(isinstance(o, Authenticated) for o in outcomes) == 1
        assert sum(isinstance(o, Rejected) for o in outcomes) == 1


class TestStoreFailures:
    """Store outages are errors, not rejections."""

    @pytest.mark.asyncio
    async def test_directory_error_propagates(self, nonce_cache):
        class BrokenDirectory:
            async def lookup_consumer(self, key):
                raise DirectoryUnavailableError("timeout", store="test")

        authenticator = Authenticator(BrokenDirectory(), ReplayGuard(nonce_cache, clock=lambda: NOW))

        with pytest.raises(DirectoryUnavailableError):
            await authenticator.authenticate(signed_request())
