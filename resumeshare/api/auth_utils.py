import os
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

SECRET_ENV_VAR = "ACCESS_TOKEN_SECRET"
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24  # 24 hours


class TokenError(Exception):
    """Bearer token could not be verified."""


class TokenExpiredError(TokenError):
    """Bearer token signature is valid but the token has expired."""


def get_secret_key() -> str | None:
    return os.environ.get(SECRET_ENV_VAR) or None


def create_access_token(
    data: dict[str, Any],
    secret: str,
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
    algorithm: str = ALGORITHM,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode in the token (id, email, role)
        secret: Shared signing secret
        expires_delta: Optional custom expiration delta
        now_utc: Current UTC time (for testing/determinism). Defaults to datetime.now(UTC).
        algorithm: JWS algorithm
    """
    to_encode = data.copy()
    current_time = now_utc if now_utc is not None else datetime.now(UTC)
    expire = current_time + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode.update({"exp": expire})
    encoded_jwt: str = jwt.encode(to_encode, secret, algorithm=algorithm)
    return encoded_jwt


def decode_access_token(token: str, secret: str, algorithm: str = ALGORITHM) -> dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises TokenExpiredError or TokenError.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token expired") from e
    except JWTError as e:
        raise TokenError("Invalid token") from e
    return cast(dict[str, Any], payload)
