"""Flash messages: one-shot notices shown after a redirect.

The message rides along in a short-lived signed cookie; the page the user
lands on reads it with get_flash_message() and shows a toast.
"""

import logging
from enum import Enum

from fastapi import Request
from fastapi.responses import RedirectResponse
from jose import JWTError, jwt
from pydantic import BaseModel, ValidationError

from apps.api.config import settings

logger = logging.getLogger(__name__)

FLASH_MAX_AGE_SECONDS = 60


class FlashType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class FlashMessage(BaseModel):
    type: FlashType
    message: str


def _redirect_with_message(path: str, flash: FlashMessage) -> RedirectResponse:
    response = RedirectResponse(url=path, status_code=302)
    response.set_cookie(
        settings.flash_cookie_name,
        jwt.encode(flash.model_dump(mode="json"), settings.jwt_secret_key, algorithm=settings.jwt_algorithm),
        max_age=FLASH_MAX_AGE_SECONDS,
        httponly=True,
        samesite="lax",
        path="/",
    )
    return response


def redirect_with_success_message(path: str, message: str) -> RedirectResponse:
    return _redirect_with_message(path, FlashMessage(type=FlashType.SUCCESS, message=message))


def redirect_with_error_message(path: str, message: str) -> RedirectResponse:
    return _redirect_with_message(path, FlashMessage(type=FlashType.ERROR, message=message))


def get_flash_message(request: Request) -> FlashMessage | None:
    """Read the flash message set by the previous redirect, if any.

    A tampered or malformed cookie is ignored.
    """
    raw = request.cookies.get(settings.flash_cookie_name)
    if not raw:
        return None
    try:
        payload = jwt.decode(raw, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        return FlashMessage.model_validate(payload)
    except (JWTError, ValidationError) as e:
        logger.warning("Ignoring invalid flash message cookie: %s", e)
        return None
