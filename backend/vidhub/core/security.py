# vidhub/core/security.py
"""
Security module for authentication.
Handles password hashing and the signing/verification of the two JWT kinds:
short-lived access tokens and longer-lived refresh tokens.
"""
import os
import uuid
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext
from dotenv import load_dotenv
from pathlib import Path

# Load environment variables from project root
ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

# Password hashing context (Argon2 only)
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)

# JWT configuration. Access and refresh tokens use distinct secrets so a
# refresh token can never pass as an access token and vice versa.
ACCESS_TOKEN_SECRET = os.getenv("ACCESS_TOKEN_SECRET", "dev-access-secret")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
REFRESH_TOKEN_SECRET = os.getenv("REFRESH_TOKEN_SECRET", "dev-refresh-secret")
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "10"))
JWT_ALG = "HS256"


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if ``plain`` matches the stored Argon2 hash."""
    if not plain or not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def _encode(claims: dict, secret: str, lifetime: dt.timedelta) -> str:
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        **claims,
        "jti": uuid.uuid4().hex,  # Unique per token, so rotation always yields a new value
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALG)


def create_access_token(user_id: str, email: str, username: str, fullname: str) -> str:
    """
    Create a JWT access token for request authorization.

    Token payload includes:
        - sub: Subject (user ID)
        - email, username, fullname: identity fields for the frontend
        - type: "access"
        - jti, iat, exp
    """
    return _encode(
        {
            "sub": user_id,
            "email": email,
            "username": username,
            "fullname": fullname,
            "type": "access",
        },
        ACCESS_TOKEN_SECRET,
        dt.timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user_id: str) -> str:
    """
    Create a JWT refresh token. It only carries the user ID; its sole use is
    to mint a new token pair.
    """
    return _encode(
        {"sub": user_id, "type": "refresh"},
        REFRESH_TOKEN_SECRET,
        dt.timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a JWT access token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid, malformed or not an access token
    """
    payload = jwt.decode(token, ACCESS_TOKEN_SECRET, algorithms=[JWT_ALG])
    if payload.get("type") != "access":
        raise jwt.InvalidTokenError("Not an access token")
    return payload


def decode_refresh_token(token: str) -> dict:
    """
    Decode and validate a JWT refresh token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid, malformed or not a refresh token
    """
    payload = jwt.decode(token, REFRESH_TOKEN_SECRET, algorithms=[JWT_ALG])
    if payload.get("type") != "refresh":
        raise jwt.InvalidTokenError("Not a refresh token")
    return payload
