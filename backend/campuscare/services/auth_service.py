"""
CampusCare Backend — Authentication Service
=============================================

What:  Password hashing and JWT issuing/verification.
How:   bcrypt (called directly) for password hashes; python-jose for HS256
       tokens. Access and refresh tokens are signed with separate secrets and
       carry a `type` claim, so neither can stand in for the other.
Who:   Used by the auth use cases and the `get_current_user` dependency.

Token claims:
    sub    user id (UUID string)
    roles  role names held when the token was issued
    type   "access" | "refresh"
    iat    issued-at (UTC)
    exp    expiry (UTC)
    jti    random token id
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from campuscare.config import Settings, settings as default_settings
from campuscare.domain.entities import User
from campuscare.exceptions import ExpiredTokenError, InvalidTokenError

logger = logging.getLogger(__name__)

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"


class AuthService:
    """
    Stateless helper around bcrypt and python-jose.

    Settings are read at call time from the bound `Settings` object so tests
    can build an AuthService with a cheap bcrypt cost or short expiry.
    """

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings

    # ── Passwords ─────────────────────────────────────────────────────────

    def hash_password(self, plain: str) -> str:
        salt = bcrypt.gensalt(rounds=self.config.bcrypt_rounds)
        return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")

    def verify_password(self, plain: str, password_hash: str) -> bool:
        """False for a wrong password or an unparseable stored hash."""
        try:
            return bcrypt.checkpw(plain.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is not a valid bcrypt hash")
            return False

    # ── Tokens ────────────────────────────────────────────────────────────

    def _secret(self, token_type: str) -> str:
        if token_type == ACCESS_TOKEN:
            return self.config.jwt_access_secret
        return self.config.jwt_refresh_secret

    def _encode(self, user: User, token_type: str, lifetime: timedelta) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(user.id),
            "roles": sorted(role.value for role in user.roles),
            "type": token_type,
            "iat": now,
            "exp": now + lifetime,
            "jti": uuid.uuid4().hex,
        }
        return jwt.encode(claims, self._secret(token_type), algorithm=self.config.jwt_algorithm)

    def create_access_token(self, user: User) -> str:
        return self._encode(
            user,
            ACCESS_TOKEN,
            timedelta(minutes=self.config.jwt_access_expire_minutes),
        )

    def create_refresh_token(self, user: User) -> str:
        return self._encode(
            user,
            REFRESH_TOKEN,
            timedelta(days=self.config.jwt_refresh_expire_days),
        )

    def _decode(self, token: str, token_type: str) -> Dict[str, Any]:
        try:
            claims = jwt.decode(
                token,
                self._secret(token_type),
                algorithms=[self.config.jwt_algorithm],
            )
        except ExpiredSignatureError as e:
            raise ExpiredTokenError(context={"token_type": token_type}) from e
        except JWTError as e:
            logger.info("Rejected %s token: %s", token_type, str(e))
            raise InvalidTokenError(context={"token_type": token_type}) from e

        if claims.get("type") != token_type:
            raise InvalidTokenError(
                message=f"Expected a {token_type} token",
                context={"token_type": token_type},
            )
        try:
            claims["sub"] = uuid.UUID(str(claims.get("sub")))
        except ValueError as e:
            raise InvalidTokenError(context={"token_type": token_type}) from e
        return claims

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """Verified claims of an access token; `sub` is returned as a UUID."""
        return self._decode(token, ACCESS_TOKEN)

    def decode_refresh_token(self, token: str) -> Dict[str, Any]:
        return self._decode(token, REFRESH_TOKEN)


# Singleton instance
auth_service = AuthService()
