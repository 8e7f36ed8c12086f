"""Password hashing and signed identity tokens.

Hashes are bcrypt; tokens are HS256 JWTs carrying ``userId``, ``email`` and
``name`` plus the standard ``iat``/``exp`` claims.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional

import bcrypt
import jwt
from fastapi import Depends, Header, Request
from pydantic import BaseModel, ConfigDict, Field

from .errors import Unauthenticated
from .settings import Settings

JWT_ALGORITHM = "HS256"


@lru_cache
def _dummy_hash(rounds: int) -> bytes:
    # checked against when the email is unknown, so both login failures cost the same
    return bcrypt.hashpw(b"bulklog-dummy-password", bcrypt.gensalt(rounds=rounds))


def _secret_bytes(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes; newer releases raise instead of truncating
    return password.encode("utf-8")[:72]


class TokenClaims(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(alias="userId")
    email: str
    name: str


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(_secret_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str], rounds: int = 12) -> bool:
    if not password_hash:
        bcrypt.checkpw(_secret_bytes(password), _dummy_hash(rounds))
        return False
    try:
        return bcrypt.checkpw(_secret_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # stored value is not a bcrypt hash
        return False


def issue_token(
    settings: Settings,
    user_id: int,
    email: str,
    name: str,
    expires_in: Optional[timedelta] = None,
) -> str:
    now = datetime.now(timezone.utc)
    ttl = expires_in if expires_in is not None else timedelta(days=settings.token_ttl_days)
    payload = {
        "userId": user_id,
        "email": email,
        "name": name,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def verify_token(settings: Settings, token: Optional[str]) -> TokenClaims:
    if not token:
        raise Unauthenticated("Missing auth token.")
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])
        return TokenClaims.model_validate(payload)
    except (jwt.InvalidTokenError, ValueError) as e:
        raise Unauthenticated("Invalid or expired token.") from e


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    return authorization[len("Bearer "):].strip() or None


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built from."""
    return request.app.state.settings


async def require_auth(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_app_settings),
) -> TokenClaims:
    """FastAPI dependency guarding authenticated routes."""
    return verify_token(settings, bearer_token(authorization))
