import base64
import binascii
import json
from datetime import UTC, datetime, timedelta
from typing import Any, cast
from urllib.parse import quote

from jose import JWTError, jwt

DEV_SECRET_KEY = "dev-secret-unsafe"
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7  # 7 days


def create_access_token(
    data: dict[str, Any],
    secret_key: str,
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode in the token
        secret_key: HMAC signing key
        expires_delta: Optional custom expiration delta
        now_utc: Current UTC time (for testing/determinism). Defaults to datetime.now(UTC).
    """
    to_encode = data.copy()
    current_time = now_utc if now_utc is not None else datetime.now(UTC)

    if expires_delta:
        expire = current_time + expires_delta
    else:
        expire = current_time + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})
    encoded_jwt: str = jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str, secret_key: str) -> dict[str, Any] | None:
    try:
        payload = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
        return cast(dict[str, Any], payload)
    except JWTError:
        return None


def decode_sign_in_token(id_token: str) -> dict[str, str]:
    """
    Decode the client's sign-in token: base64-encoded JSON with an email.

    Raises:
        ValueError: If the token cannot be decoded or carries no email.
    """
    try:
        raw = base64.b64decode(id_token, validate=True)
        claims = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError("Failed to verify token") from e

    if not isinstance(claims, dict):
        raise ValueError("Failed to verify token")

    email = claims.get("email")
    if not isinstance(email, str) or "@" not in email:
        raise ValueError("Token carries no email")

    name = claims.get("name") or email.split("@")[0]
    return {
        "user_id": f"user-{claims.get('timestamp', '')}",
        "email": email,
        "name": str(name),
        "picture": f"https://ui-avatars.com/api/?name={quote(str(name))}&background=random",
    }
