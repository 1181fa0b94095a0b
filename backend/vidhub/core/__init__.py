# vidhub/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- db: Database configuration and connection management
- errors: Uniform ApiError, response envelope and error handlers
- security: Password hashing and access/refresh JWT handling
"""
