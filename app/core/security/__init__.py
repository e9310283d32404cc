# app/core/security/__init__.py

# Hashing
from app.core.security.hashing import hash_password, verify_password, hash_token

# JWT
from app.core.security.jwt import (
    create_access_token,
    create_refresh_token,
    verify_token,
)

__all__ = [
    "hash_password", "verify_password", "hash_token",
    "create_access_token", "create_refresh_token", "verify_token",
]
