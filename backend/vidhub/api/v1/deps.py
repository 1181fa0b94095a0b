from fastapi import Header, Request, status
from vidhub.core.errors import ApiError
from vidhub.core.security import decode_access_token
from vidhub.models.user import User


async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> User:
    """
    FastAPI dependency to get the current authenticated user.

    The access token is read from either:
    1. Authorization header (Bearer token) - preferred method
    2. HttpOnly cookie (accessToken) - fallback method

    Raises:
        ApiError (401): No token ("Unauthorized request")
        ApiError (401): Invalid/expired token or unknown user ("Invalid access token")

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            ...
    """
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    if not token:
        token = request.cookies.get("accessToken")

    if not token:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized request")

    try:
        payload = decode_access_token(token)
        user_id = payload.get("sub")
    except Exception:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid access token")

    user = await User.get_or_none(id=user_id)
    if not user:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid access token")
    return user
