import uuid
import logging

import jwt
from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status
from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q

from vidhub.api.v1.deps import get_current_user
from vidhub.api.v1.uploads import has_file, save_upload_to_temp
from vidhub.core.errors import ApiError, api_response
from vidhub.core.security import decode_refresh_token, hash_password, verify_password
from vidhub.models.user import User, get_public_user
from vidhub.schemas.auth import ChangePasswordRequest, LoginRequest, RefreshTokenRequest, serialize_user
from vidhub.services.cloudinary import remove_local_file, upload_on_cloudinary
from vidhub.services.tokens import generate_access_and_refresh_tokens

logger = logging.getLogger("uvicorn.error")

router = APIRouter(prefix="/users", tags=["users"])

# Both auth cookies are HttpOnly and Secure
COOKIE_OPTIONS = {"httponly": True, "secure": True}


def _set_auth_cookies(response: Response, access_token: str, refresh_token: str) -> None:
    response.set_cookie("accessToken", access_token, **COOKIE_OPTIONS)
    response.set_cookie("refreshToken", refresh_token, **COOKIE_OPTIONS)


def _clear_auth_cookies(response: Response) -> None:
    response.delete_cookie("accessToken", **COOKIE_OPTIONS)
    response.delete_cookie("refreshToken", **COOKIE_OPTIONS)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    fullname: str | None = Form(default=None),
    email: str | None = Form(default=None),
    username: str | None = Form(default=None),
    password: str | None = Form(default=None),
    avatar: UploadFile | None = File(default=None),
    coverImage: UploadFile | None = File(default=None),
):
    """
    Register a new user account (multipart form).

    Steps, in order:
      1. All of fullname/email/username/password must be non-blank (400)
      2. No existing user with the same username OR email (409)
      3. An avatar file must be attached (400); nothing is uploaded otherwise
      4. Avatar (and optional cover image) are uploaded to Cloudinary;
         a failed avatar upload is a 500
      5. The user is created (username/email lowercased, password hashed)
         and re-fetched through the sanitized projection

    Returns:
        201 envelope whose data is the sanitized user (no password, no refresh token)
    """
    if any(not (field or "").strip() for field in (fullname, email, username, password)):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "All fields are required")

    username = username.strip().lower()
    email = email.strip().lower()

    if await User.filter(Q(username=username) | Q(email=email)).exists():
        raise ApiError(status.HTTP_409_CONFLICT, "User with email or username already exists")

    if not has_file(avatar):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Avatar file is required")

    avatar_local_path = cover_local_path = None
    try:
        avatar_local_path = await save_upload_to_temp(avatar)
        cover_local_path = await save_upload_to_temp(coverImage)

        uploaded_avatar = await upload_on_cloudinary(avatar_local_path)
        uploaded_cover = await upload_on_cloudinary(cover_local_path)
    finally:
        # The uploader removes what it was handed; anything left is an orphan
        for path in (avatar_local_path, cover_local_path):
            if path:
                remove_local_file(path)

    if not uploaded_avatar or not uploaded_avatar.get("url"):
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Avatar upload failed")

    try:
        user = await User.create(
            fullname=fullname.strip(),
            avatar=uploaded_avatar["url"],
            cover_image=(uploaded_cover or {}).get("url") or "",
            username=username,
            email=email,
            password=hash_password(password),
        )
    except IntegrityError:
        # Lost a race against a concurrent registration with the same identity
        raise ApiError(status.HTTP_409_CONFLICT, "User with email or username already exists")

    created_user = await get_public_user(user.id)
    if not created_user:
        raise ApiError(status.HTTP_500_INTERNAL_SERVER_ERROR, "Something went wrong while registering the user")

    logger.info("[users] registered username=%s id=%s", username, user.id)
    return api_response(status.HTTP_201_CREATED, serialize_user(created_user), "User registered successfully")


@router.post("/login")
async def login(payload: LoginRequest, response: Response):
    """
    Authenticate by username or email plus password.

    On success both tokens are returned in the body and set as
    HttpOnly/Secure cookies; the refresh token is stored on the user.

    Raises:
        ApiError (400): Neither username nor email supplied
        ApiError (404): No such user
        ApiError (401): Wrong password
    """
    identifiers = []
    if payload.username and payload.username.strip():
        identifiers.append(Q(username=payload.username.strip().lower()))
    if payload.email and payload.email.strip():
        identifiers.append(Q(email=payload.email.strip().lower()))
    if not identifiers:
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Username or email is required")

    user = await User.filter(Q(*identifiers, join_type="OR")).first()
    if not user:
        raise ApiError(status.HTTP_404_NOT_FOUND, "User does not exist")

    if not verify_password(payload.password, user.password):
        logger.warning("[users] failed login for username=%s", user.username)
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid user credentials")

    tokens = await generate_access_and_refresh_tokens(user.id)
    logged_in_user = await get_public_user(user.id)

    _set_auth_cookies(response, tokens.access_token, tokens.refresh_token)
    return api_response(
        status.HTTP_200_OK,
        {
            "user": serialize_user(logged_in_user),
            "accessToken": tokens.access_token,
            "refreshToken": tokens.refresh_token,
        },
        "User logged in successfully",
    )


@router.post("/logout")
async def logout(response: Response, user: User = Depends(get_current_user)):
    """
    Revoke the caller's refresh token and clear both auth cookies.
    Safe to call repeatedly while the access token is still valid.
    """
    await User.filter(id=user.id).update(refresh_token=None)
    _clear_auth_cookies(response)
    logger.info("[users] logged out id=%s", user.id)
    return api_response(status.HTTP_200_OK, {}, "User logged out successfully")


@router.post("/refresh-token")
async def refresh_access_token(
    request: Request,
    response: Response,
    payload: RefreshTokenRequest | None = None,
):
    """
    Rotate the token pair using a refresh token.

    The incoming token is read from the refreshToken cookie, falling back to
    the JSON body. It must verify against the refresh secret AND equal the
    token currently stored on the user; anything else is a 401. On success
    the stored refresh token is replaced, so the presented one can never be
    used again.
    """
    incoming_refresh_token = request.cookies.get("refreshToken") or (payload.refreshToken if payload else None)
    if not incoming_refresh_token:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Unauthorized request")

    try:
        decoded = decode_refresh_token(incoming_refresh_token)
        user_id = uuid.UUID(str(decoded.get("sub")))
    except (jwt.PyJWTError, ValueError) as e:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, str(e) or "Invalid refresh token")

    user = await User.get_or_none(id=user_id)
    if not user:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid refresh token")

    if incoming_refresh_token != user.refresh_token:
        logger.warning("[users] stale refresh token presented for id=%s", user.id)
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Refresh token is expired or used")

    tokens = await generate_access_and_refresh_tokens(user.id)

    _set_auth_cookies(response, tokens.access_token, tokens.refresh_token)
    return api_response(
        status.HTTP_200_OK,
        {"accessToken": tokens.access_token, "refreshToken": tokens.refresh_token},
        "Access token refreshed",
    )


@router.get("/current-user")
async def current_user(user: User = Depends(get_current_user)):
    """Return the sanitized record of the authenticated caller."""
    row = await get_public_user(user.id)
    if not row:
        raise ApiError(status.HTTP_401_UNAUTHORIZED, "Invalid access token")
    return api_response(status.HTTP_200_OK, serialize_user(row), "Current user fetched successfully")


@router.post("/change-password")
async def change_password(body: ChangePasswordRequest, user: User = Depends(get_current_user)):
    """
    Change the caller's password. The current password must be supplied and
    must verify; the new one must be non-blank.
    """
    if not body.newPassword.strip():
        raise ApiError(status.HTTP_400_BAD_REQUEST, "New password is required")
    if not verify_password(body.oldPassword, user.password):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Invalid old password")

    user.password = hash_password(body.newPassword)
    await user.save(update_fields=["password"])
    return api_response(status.HTTP_200_OK, {}, "Password changed successfully")
