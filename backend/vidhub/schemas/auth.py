# vidhub/schemas/auth.py
"""
Pydantic schemas for the user/auth endpoints.
Defines request bodies and the sanitized user view returned to clients.
"""
import datetime as dt
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class LoginRequest(BaseModel):
    """
    Request model for user login.
    Either username or email identifies the account.
    """
    username: str | None = None
    email: str | None = None
    password: str


class RefreshTokenRequest(BaseModel):
    """Body fallback for clients that cannot send the refreshToken cookie."""
    refreshToken: str | None = None


class ChangePasswordRequest(BaseModel):
    oldPassword: str
    newPassword: str


class UserOut(BaseModel):
    """
    Sanitized user view. Built from the PUBLIC_USER_FIELDS projection and
    serialized in camelCase (coverImage, createdAt, updatedAt).
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: UUID
    fullname: str
    username: str
    email: str
    avatar: str
    cover_image: str = ""
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


def serialize_user(row: dict) -> dict:
    """Render a projected user row as the JSON-ready camelCase dict."""
    return UserOut.model_validate(row).model_dump(mode="json", by_alias=True)
