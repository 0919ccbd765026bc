"""Authentication dependencies for FastAPI routes.

Two flavours:
- get_current_user: the route requires a logged-in user (401 otherwise)
- get_optional_user: the route behaves differently for anonymous visitors

Both accept the token from "Authorization: Bearer <token>" or from the
session cookie, in that order.
"""

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.auth.jwt import decode_access_token
from apps.api.config import settings
from apps.api.database import get_db
from apps.api.exceptions import UnauthorizedException
from apps.api.models.user import User
from apps.api.repositories import user_repo

# auto_error=False: a missing header is not an error, the cookie may carry the session
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def _session_token(request: Request, bearer_token: str | None) -> str | None:
    return bearer_token or request.cookies.get(settings.session_cookie_name)


async def get_optional_user(
    request: Request,
    bearer_token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """The logged-in user, or None for anonymous requests.

    Invalid or expired tokens, unknown users and deactivated accounts all
    count as anonymous.
    """
    token = _session_token(request, bearer_token)
    if not token:
        return None

    user_id = decode_access_token(token)
    if user_id is None:
        return None

    user = await user_repo.get_by_id(db, user_id)
    if user is None or not user.is_active:
        return None

    return user


async def get_current_user(
    request: Request,
    bearer_token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """The logged-in user; raises 401 if there is none."""
    token = _session_token(request, bearer_token)
    if not token:
        raise UnauthorizedException()

    user_id = decode_access_token(token)
    if user_id is None:
        raise UnauthorizedException("Invalid or expired token")

    user = await user_repo.get_by_id(db, user_id)
    if user is None:
        raise UnauthorizedException("User not found")

    if not user.is_active:
        raise UnauthorizedException("User account is deactivated")

    return user
