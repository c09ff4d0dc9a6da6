"""Tests for the current-user dependency.

Local-first mode resolves DEFAULT_USER_ID; hosted mode validates the
JWT session cookie. Every failure is the same 401.
"""

import json
import uuid
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import jwt
import pytest
from pydantic import SecretStr
from starlette.requests import Request

from job_tracker.api.deps import get_current_user_id
from job_tracker.core.config import settings
from job_tracker.core.errors import UnauthorizedError
from tests.conftest import TEST_AUTH_SECRET, TEST_USER_ID, create_test_jwt


def _request(cookie: str | None = None) -> Request:
    headers = []
    if cookie is not None:
        headers.append(
            (b"cookie", f"{settings.auth_cookie_name}={cookie}".encode())
        )
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


@pytest.fixture
def local_mode() -> Iterator[None]:
    """Auth disabled, no default user."""
    original_enabled = settings.auth_enabled
    original_default = settings.default_user_id
    settings.auth_enabled = False
    settings.default_user_id = None
    yield
    settings.auth_enabled = original_enabled
    settings.default_user_id = original_default


@pytest.fixture
def hosted_mode() -> Iterator[None]:
    """Auth enabled with the test secret."""
    original_enabled = settings.auth_enabled
    original_secret = settings.auth_secret
    settings.auth_enabled = True
    settings.auth_secret = SecretStr(TEST_AUTH_SECRET)
    yield
    settings.auth_enabled = original_enabled
    settings.auth_secret = original_secret


class TestLocalFirstMode:
    """Auth disabled."""

    def test_default_user_id_returned(self, local_mode):  # noqa: ARG002
        """DEFAULT_USER_ID is the caller."""
        settings.default_user_id = TEST_USER_ID
        assert get_current_user_id(_request()) == TEST_USER_ID

    def test_no_default_user_is_unauthorized(self, local_mode):  # noqa: ARG002
        """Without DEFAULT_USER_ID there is no identity at all."""
        with pytest.raises(UnauthorizedError):
            get_current_user_id(_request())


class TestHostedMode:
    """Auth enabled: JWT in the session cookie."""

    def test_valid_token(self, hosted_mode):  # noqa: ARG002
        """A valid token yields its subject."""
        user_id = uuid.uuid4()
        token = create_test_jwt(user_id)
        assert get_current_user_id(_request(token)) == user_id

    def test_missing_cookie(self, hosted_mode):  # noqa: ARG002
        """No cookie is a 401."""
        with pytest.raises(UnauthorizedError):
            get_current_user_id(_request())

    def test_expired_token(self, hosted_mode):  # noqa: ARG002
        """An expired token is a 401."""
        token = create_test_jwt(expires_delta=timedelta(minutes=-5))
        with pytest.raises(UnauthorizedError):
            get_current_user_id(_request(token))

    def test_wrong_secret(self, hosted_mode):  # noqa: ARG002
        """A token signed with another secret is a 401."""
        token = create_test_jwt(secret="another-secret-that-is-long-enough-to-use")
        with pytest.raises(UnauthorizedError):
            get_current_user_id(_request(token))

    def test_wrong_audience(self, hosted_mode):  # noqa: ARG002
        """A token minted for another service is a 401."""
        token = create_test_jwt(audience="some-other-service")
        with pytest.raises(UnauthorizedError):
            get_current_user_id(_request(token))

    def test_garbage_token(self, hosted_mode):  # noqa: ARG002
        """A malformed token is a 401."""
        with pytest.raises(UnauthorizedError):
            get_current_user_id(_request("not.a.jwt"))

    def test_message_does_not_leak_reason(self, hosted_mode):  # noqa: ARG002
        """The error never says why auth failed."""
        token = create_test_jwt(expires_delta=timedelta(minutes=-5))
        with pytest.raises(UnauthorizedError) as exc_info:
            get_current_user_id(_request(token))
        assert exc_info.value.message == "Authentication required"

    @pytest.mark.parametrize("sub", [12345, ["x"], {"id": str(TEST_USER_ID)}])
    def test_non_string_subject(self, hosted_mode, sub):  # noqa: ARG002
        """A correctly signed token whose sub isn't a string is still a 401."""
        claims = {
            "sub": sub,
            "aud": settings.auth_audience,
            "iss": settings.auth_issuer,
            "exp": int((datetime.now(UTC) + timedelta(hours=1)).timestamp()),
        }
        # Signed at the JWS layer so no claim checks run while encoding.
        token = jwt.api_jws.encode(
            json.dumps(claims).encode(), TEST_AUTH_SECRET, algorithm="HS256"
        )
        with pytest.raises(UnauthorizedError):
            get_current_user_id(_request(token))
