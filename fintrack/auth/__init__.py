"""
Authentication module.
"""

from fintrack.auth.password import verify_password, hash_password
from fintrack.auth.jwt import create_access_token, create_refresh_token, decode_token
from fintrack.auth.tokens import hash_token
from fintrack.auth.dependencies import get_current_user

__all__ = [
    "verify_password",
    "hash_password",
    "create_access_token",
    "create_refresh_token",
    "decode_token",
    "hash_token",
    "get_current_user",
]
