# vidhub/models/user.py
"""
Database model for users.
Holds identity fields, the password hash, profile images hosted on
Cloudinary and the currently valid refresh token.
"""
import uuid
from tortoise import fields, models

# Columns that may leave the data-access layer. Anything not listed here
# (password, refresh_token, and any column added later) stays private.
PUBLIC_USER_FIELDS = (
    "id",
    "fullname",
    "username",
    "email",
    "avatar",
    "cover_image",
    "created_at",
    "updated_at",
)


class User(models.Model):
    """
    User database model.

    Security:
    - Password is stored as an Argon2 hash (never plain text)
    - Username and email are unique and stored lowercased
    - refresh_token is the only refresh token accepted for this user;
      it is overwritten on login/refresh and cleared on logout
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    fullname = fields.CharField(max_length=256)
    username = fields.CharField(max_length=256, unique=True, index=True)
    email = fields.CharField(max_length=256, unique=True, index=True)
    password = fields.CharField(max_length=255)  # Argon2 hash
    avatar = fields.CharField(max_length=1024)  # Cloudinary URL (required)
    cover_image = fields.CharField(max_length=1024, default="")  # Cloudinary URL or ""
    refresh_token = fields.TextField(null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"


async def get_public_user(user_id) -> dict | None:
    """
    Fetch the sanitized view of a user: only PUBLIC_USER_FIELDS are selected.
    Returns None when no such user exists.
    """
    rows = await User.filter(id=user_id).limit(1).values(*PUBLIC_USER_FIELDS)
    return rows[0] if rows else None
