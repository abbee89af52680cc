import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, cast

from jose import jwt
from jose.exceptions import JWTError

ALGORITHM = "HS256"


def create_session_token(
    session_id: str,
    secret: str,
    expires_delta: timedelta,
    algorithm: str = ALGORITHM,
) -> str:
    """Signed token carrying the opaque session id as its `sid` claim"""
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode: dict[str, Any] = {"exp": expire, "sid": session_id}
    encoded_jwt = jwt.encode(to_encode, secret, algorithm=algorithm)
    return cast(str, encoded_jwt)


def decode_session_token(
    token: str, secret: str, algorithm: str = ALGORITHM
) -> Optional[str]:
    """Session id from a token, or None if it is forged, expired or malformed"""
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except JWTError:
        return None
    session_id = payload.get("sid")
    return session_id if isinstance(session_id, str) else None


def verify_organiser_password(
    configured_password: Optional[str], supplied_password: Optional[str]
) -> bool:
    # No configured password means the organiser cannot log in at all
    if not configured_password or supplied_password is None:
        return False
    return secrets.compare_digest(
        configured_password.encode("utf-8"), supplied_password.encode("utf-8")
    )
