"""Password hashing (passlib) and signed access tokens (itsdangerous).

Access tokens carry {id, username, role, type} and expire after
ACCESS_TOKEN_TTL_SECONDS. Refresh tokens are opaque random strings persisted in
the refresh_tokens table so they can be rotated and revoked.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext

from relief_hub.config import ACCESS_TOKEN_TTL_SECONDS, REFRESH_TOKEN_TTL_DAYS, TOKEN_SECRET

ACCESS_TOKEN_TYPE = "access"

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
)

_serializer = URLSafeTimedSerializer(TOKEN_SECRET, salt="relief-hub.access")


class InvalidTokenError(Exception):
    """Bearer token is malformed, tampered with, expired or of the wrong type."""


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(user_id: int, username: str, role: str) -> str:
    return _serializer.dumps(
        {"id": user_id, "username": username, "role": role, "type": ACCESS_TOKEN_TYPE}
    )


def decode_access_token(token: str, max_age_seconds: int = ACCESS_TOKEN_TTL_SECONDS) -> dict[str, Any]:
    """Return the token payload or raise InvalidTokenError."""
    try:
        payload = _serializer.loads(token, max_age=max_age_seconds)
    except SignatureExpired as e:
        raise InvalidTokenError("Access token expired") from e
    except BadSignature as e:
        raise InvalidTokenError("Invalid access token") from e
    if not isinstance(payload, dict) or payload.get("type") != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError("Invalid token type")
    return payload


def new_refresh_token() -> tuple[str, datetime]:
    """Return (token, expires_at) for a fresh refresh token."""
    expires_at = datetime.now(timezone.utc) + timedelta(days=REFRESH_TOKEN_TTL_DAYS)
    return secrets.token_urlsafe(48), expires_at
