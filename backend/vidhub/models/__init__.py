# vidhub/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account, profile images and current refresh token
"""
from .user import User, PUBLIC_USER_FIELDS, get_public_user
