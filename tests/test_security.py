"""Unit tests for bearer token verification."""

from datetime import timedelta

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from app.core.exceptions import AuthenticationError
from app.core.security import Identity, TokenVerifier


class TestVerify:
    """Tests for TokenVerifier.verify."""

    def test_returns_subject_used_to_sign(self, token_verifier: TokenVerifier):
        token = token_verifier.create_access_token("user-42", extra_claims={"role": "ADMIN_ROLE"})

        identity = token_verifier.verify(token)

        assert identity.subject == "user-42"
        assert identity.claims["role"] == "ADMIN_ROLE"
        assert "exp" in identity.claims

    def test_rejects_token_signed_with_other_secret(self, token_verifier: TokenVerifier):
        forged = TokenVerifier(secret_key="someone-else").create_access_token("user-1")

        with pytest.raises(AuthenticationError):
            token_verifier.verify(forged)

    def test_rejects_expired_token(self, token_verifier: TokenVerifier):
        token = token_verifier.create_access_token("user-1", expires_delta=timedelta(minutes=-5))

        with pytest.raises(AuthenticationError) as exc_info:
            token_verifier.verify(token)
        assert exc_info.value.message == "Token has expired"

    def test_rejects_token_without_subject(self, token_verifier: TokenVerifier):
        token = jwt.encode({"name": "no subject"}, token_verifier.secret_key, algorithm="HS256")

        with pytest.raises(AuthenticationError):
            token_verifier.verify(token)

    def test_rejects_garbage(self, token_verifier: TokenVerifier):
        with pytest.raises(AuthenticationError):
            token_verifier.verify("not-a-jwt")

    def test_from_settings(self, settings):
        verifier = TokenVerifier.from_settings(settings)

        assert verifier.secret_key == settings.jwt_secret_key
        assert verifier.algorithm == "HS256"
        assert verifier.expire_minutes == settings.jwt_expire_minutes


class TestRequireIdentity:
    """Tests for the FastAPI dependency."""

    async def test_missing_credentials(self, token_verifier: TokenVerifier):
        with pytest.raises(AuthenticationError):
            await token_verifier.require_identity(None)

    async def test_valid_credentials(self, token_verifier: TokenVerifier):
        credentials = HTTPAuthorizationCredentials(
            scheme="Bearer", credentials=token_verifier.create_access_token("user-7")
        )

        identity = await token_verifier.require_identity(credentials)

        assert identity == Identity(subject="user-7", claims=identity.claims)
