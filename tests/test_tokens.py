"""
Unit tests for token issuing and verification.
"""

from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import jwt
import pytest

from myflix.config.provider import AuthConfig
from myflix.modules.auth import TokenIssuer, TokenVerifier
from myflix.modules.errors import InvalidToken, StaleIdentity, TokenExpired

from conftest import TEST_SECRET


@pytest.fixture
def users_mock():
    """Create a mock user directory where every user exists."""
    users = MagicMock()
    users.user_exists = AsyncMock(return_value=True)
    return users


@pytest.fixture
def issuer(auth_config, clock):
    return TokenIssuer(auth_config, clock=clock)


@pytest.fixture
def verifier(auth_config, users_mock, clock):
    return TokenVerifier(auth_config, users_mock, clock=clock)


class TestIssueToken:
    """Tests for TokenIssuer."""

    def test_claims(self, issuer, clock):
        issued = issuer.issue_token("alice1")

        claims = jwt.decode(issued.token, TEST_SECRET, algorithms=["HS256"], options={"verify_exp": False})
        assert claims["sub"] == "alice1"
        assert claims["iat"] == int(clock.now.timestamp())
        assert claims["exp"] == int((clock.now + timedelta(days=7)).timestamp())

    def test_default_lifetime_is_seven_days(self, issuer, clock):
        issued = issuer.issue_token("alice1")

        assert issued.issued_at == clock.now
        assert issued.expires_at - issued.issued_at == timedelta(days=7)

    def test_configurable_lifetime(self, clock):
        issuer = TokenIssuer(AuthConfig(jwt_secret=TEST_SECRET, token_ttl_seconds=60), clock=clock)

        issued = issuer.issue_token("alice1")

        assert issued.expires_at == clock.now + timedelta(seconds=60)


class TestVerifyToken:
    """Tests for TokenVerifier."""

    @pytest.mark.asyncio
    async def test_valid_token(self, issuer, verifier):
        token = issuer.issue_token("alice1").token

        assert await verifier.verify(token) == "alice1"

    @pytest.mark.asyncio
    async def test_passes_strictly_before_expiry(self, issuer, verifier, clock):
        issued = issuer.issue_token("alice1")

        clock.now = issued.expires_at - timedelta(seconds=1)
        assert await verifier.verify(issued.token) == "alice1"

        clock.now = issued.expires_at - timedelta(microseconds=1)
        assert await verifier.verify(issued.token) == "alice1"

    @pytest.mark.asyncio
    async def test_fails_after_expiry(self, issuer, verifier, clock):
        issued = issuer.issue_token("alice1")

        clock.now = issued.expires_at + timedelta(microseconds=1)
        with pytest.raises(TokenExpired):
            await verifier.verify(issued.token)

        clock.advance(days=30)
        with pytest.raises(TokenExpired):
            await verifier.verify(issued.token)

    @pytest.mark.asyncio
    async def test_wrong_signature(self, verifier, clock):
        token = jwt.encode(
            {"sub": "alice1", "iat": 0, "exp": int(clock.now.timestamp()) + 60},
            "some-other-secret-that-is-long-enough-for-hs256",
            algorithm="HS256",
        )

        with pytest.raises(InvalidToken):
            await verifier.verify(token)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
    async def test_malformed_token(self, verifier, token):
        with pytest.raises(InvalidToken):
            await verifier.verify(token)

    @pytest.mark.asyncio
    async def test_missing_exp_claim(self, verifier):
        token = jwt.encode({"sub": "alice1", "iat": 0}, TEST_SECRET, algorithm="HS256")

        with pytest.raises(InvalidToken):
            await verifier.verify(token)

    @pytest.mark.asyncio
    async def test_alg_none_rejected(self, verifier, clock):
        token = jwt.encode(
            {"sub": "alice1", "iat": 0, "exp": int(clock.now.timestamp()) + 60},
            None,
            algorithm="none",
        )

        with pytest.raises(InvalidToken):
            await verifier.verify(token)

    @pytest.mark.asyncio
    async def test_deleted_user_is_stale(self, issuer, verifier, users_mock):
        token = issuer.issue_token("alice1").token
        users_mock.user_exists.return_value = False

        with pytest.raises(StaleIdentity):
            await verifier.verify(token)

        users_mock.user_exists.assert_called_once_with("alice1")

    @pytest.mark.asyncio
    async def test_expired_token_never_hits_user_lookup(self, issuer, verifier, users_mock, clock):
        issued = issuer.issue_token("alice1")
        clock.now = issued.expires_at + timedelta(seconds=1)

        with pytest.raises(TokenExpired):
            await verifier.verify(issued.token)

        users_mock.user_exists.assert_not_called()
