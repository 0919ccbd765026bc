"""Authentication package.

    from apps.api.auth import get_current_user, get_optional_user
"""

from apps.api.auth.jwt import create_access_token, decode_access_token
from apps.api.auth.dependencies import get_current_user, get_optional_user, oauth2_scheme

__all__ = [
    "create_access_token",
    "decode_access_token",
    "get_current_user",
    "get_optional_user",
    "oauth2_scheme",
]
