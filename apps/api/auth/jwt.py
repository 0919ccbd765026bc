"""JWT helpers.

Ferry keeps the logged-in user in a signed JWT, sent either as a bearer
token (API clients) or in the session cookie (browser). The token only
carries the user id; the user itself is always reloaded from the database.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

from jose import JWTError, jwt

from apps.api.config import settings


def create_access_token(user_id: UUID) -> tuple[str, int]:
    """Create a JWT for a user.

    Returns:
        Tuple of (token_string, expires_in_seconds)
    """
    expires_in = settings.jwt_expire_minutes * 60
    issued_at = datetime.now(timezone.utc)

    payload = {
        "sub": str(user_id),
        "exp": issued_at + timedelta(minutes=settings.jwt_expire_minutes),
        "iat": issued_at,
    }

    token = jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return token, expires_in


def decode_access_token(token: str) -> UUID | None:
    """Return the user id from a token, or None if it is invalid or expired."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        user_id_str: str | None = payload.get("sub")
        if user_id_str is None:
            return None
        return UUID(user_id_str)
    except (JWTError, ValueError):
        return None
