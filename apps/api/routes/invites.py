"""Invite routes: redeem a workspace invite link.

Invite emails link to /invites/accept?token=<token>. Every outcome is a
redirect to the home page with a flash message explaining what happened.
Accepting the invite (creating the membership) happens on that page.
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from apps.api.auth import get_optional_user
from apps.api.database import get_db
from apps.api.messages import redirect_with_error_message, redirect_with_success_message
from apps.api.models.user import User
from apps.api.repositories import invite_repo

router = APIRouter(prefix="/invites", tags=["invites"])
logger = logging.getLogger(__name__)

HOME_PATH = "/"


@router.get("/accept")
async def accept_invite(
    token: str | None = Query(default=None),
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """Check an invite link against the logged-in user."""
    if not token:
        return redirect_with_error_message(
            HOME_PATH,
            "Invalid invite url. Please ask the person who invited you to send another invite.",
        )

    invite = await invite_repo.get_by_token(db, token)
    if not invite:
        logger.info("Invite link used with unknown token")
        return redirect_with_error_message(
            HOME_PATH,
            "Invite not found. Please ask the person who invited you to send another invite.",
        )

    if not user:
        return redirect_with_success_message(HOME_PATH, "Please login to accept the invite.")

    if invite.email != user.email:
        logger.info("Invite %s opened by a different account (%s)", invite.id, user.id)
        return redirect_with_error_message(
            HOME_PATH,
            f"This invite is for a different email address. This account is registered to {user.email}.",
        )

    return redirect_with_success_message(HOME_PATH, "Invite retrieved")
