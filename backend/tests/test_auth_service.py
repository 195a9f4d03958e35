"""
CampusCare Backend — AuthService Tests
========================================

What:  Tests for bcrypt hashing and JWT issue/verify.
How:   AuthService is built on a test Settings object (bcrypt cost 4).
       Expired tokens are minted directly with python-jose.
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from campuscare.config import Settings
from campuscare.domain.roles import RoleName
from campuscare.exceptions import ExpiredTokenError, InvalidTokenError
from campuscare.services.auth_service import AuthService


@pytest.fixture
def config():
    return Settings(
        jwt_access_secret="unit-access",
        jwt_refresh_secret="unit-refresh",
        bcrypt_rounds=4,
    )


@pytest.fixture
def auth(config):
    return AuthService(config)


class TestPasswordHashing:
    def test_hash_and_verify(self, auth):
        hashed = auth.hash_password("correct horse")
        assert hashed != "correct horse"
        assert hashed.startswith("$2")
        assert auth.verify_password("correct horse", hashed)
        assert not auth.verify_password("wrong horse", hashed)

    def test_same_password_gets_different_salts(self, auth):
        assert auth.hash_password("repeatable") != auth.hash_password("repeatable")

    def test_garbage_hash_does_not_verify(self, auth):
        assert auth.verify_password("anything", "not-a-bcrypt-hash") is False


class TestTokens:
    def test_access_token_round_trip(self, auth, make_user):
        user = make_user(roles=(RoleName.STUDENT, RoleName.CAFETERIA))
        claims = auth.decode_access_token(auth.create_access_token(user))

        assert claims["sub"] == user.id
        assert claims["type"] == "access"
        assert claims["roles"] == ["cafeteria", "student"]
        assert claims["jti"]

    def test_refresh_token_round_trip(self, auth, make_user):
        user = make_user()
        claims = auth.decode_refresh_token(auth.create_refresh_token(user))
        assert claims["sub"] == user.id
        assert claims["type"] == "refresh"

    def test_refresh_token_is_not_an_access_token(self, auth, make_user):
        refresh = auth.create_refresh_token(make_user())
        # Signed with the refresh secret, so the access secret rejects it
        with pytest.raises(InvalidTokenError):
            auth.decode_access_token(refresh)

    def test_wrong_type_claim_rejected(self, auth, config, make_user):
        user = make_user()
        token = jwt.encode(
            {
                "sub": str(user.id),
                "type": "refresh",
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            },
            config.jwt_access_secret,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError) as exc_info:
            auth.decode_access_token(token)
        assert "access" in exc_info.value.message

    def test_expired_token(self, auth, config, make_user):
        user = make_user()
        token = jwt.encode(
            {
                "sub": str(user.id),
                "type": "access",
                "exp": datetime.now(timezone.utc) - timedelta(minutes=1),
            },
            config.jwt_access_secret,
            algorithm="HS256",
        )
        with pytest.raises(ExpiredTokenError):
            auth.decode_access_token(token)

    def test_bad_signature(self, auth, make_user):
        other = AuthService(Settings(jwt_access_secret="someone-else", jwt_refresh_secret="x", bcrypt_rounds=4))
        token = other.create_access_token(make_user())
        with pytest.raises(InvalidTokenError):
            auth.decode_access_token(token)

    @pytest.mark.parametrize("token", ["", "abc", "a.b.c"])
    def test_malformed_token(self, auth, token):
        with pytest.raises(InvalidTokenError):
            auth.decode_access_token(token)

    def test_non_uuid_subject(self, auth, config):
        token = jwt.encode(
            {
                "sub": "not-a-uuid",
                "type": "access",
                "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
            },
            config.jwt_access_secret,
            algorithm="HS256",
        )
        with pytest.raises(InvalidTokenError):
            auth.decode_access_token(token)


class TestProductionValidation:
    def test_defaults_are_rejected(self):
        config = Settings(
            jwt_access_secret="change-me-access-secret",
            jwt_refresh_secret="change-me-refresh-secret",
        )
        with pytest.raises(ValueError) as exc_info:
            config.validate_required_for_production()
        assert "JWT_ACCESS_SECRET" in str(exc_info.value)

    def test_shared_secret_rejected(self):
        config = Settings(jwt_access_secret="same", jwt_refresh_secret="same")
        with pytest.raises(ValueError):
            config.validate_required_for_production()

    def test_distinct_secrets_pass(self, config):
        config.validate_required_for_production()
