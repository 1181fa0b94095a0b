"""
Services module initialization.

Services:
- cloudinary: Upload of avatar / cover images to Cloudinary
- tokens: Access/refresh token pair issuance and refresh-token persistence
"""
from .cloudinary import upload_on_cloudinary
from .tokens import TokenPair, generate_access_and_refresh_tokens

__all__ = [
    "upload_on_cloudinary",
    "TokenPair",
    "generate_access_and_refresh_tokens",
]
