"""
Token issuance: mint an access/refresh pair for a user and remember the
refresh token on the user record.
"""
import logging
from typing import NamedTuple

from fastapi import status

from vidhub.core.errors import ApiError
from vidhub.core.security import create_access_token, create_refresh_token
from vidhub.models.user import User

logger = logging.getLogger("uvicorn.error")


class TokenPair(NamedTuple):
    access_token: str
    refresh_token: str


async def generate_access_and_refresh_tokens(user_id) -> TokenPair:
    """
    Look up the user, sign both tokens and persist the refresh token.

    Exactly one record update per call (only ``refresh_token`` is written).
    Any failure is reported as a 500 without exposing the cause.
    """
    try:
        user = await User.get(id=user_id)
        access_token = create_access_token(str(user.id), user.email, user.username, user.fullname)
        refresh_token = create_refresh_token(str(user.id))

        user.refresh_token = refresh_token
        await user.save(update_fields=["refresh_token"])

        return TokenPair(access_token, refresh_token)
    except Exception:
        logger.exception("[tokens] failed to issue tokens for user %s", user_id)
        raise ApiError(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Something went wrong while generating refresh and access tokens",
        )
