"""
Token hashing utilities.

Refresh tokens are persisted only as SHA-256 digests.
"""

import hashlib


def hash_token(token: str) -> str:
    """
    Create a SHA-256 hash of a token for secure storage.

    Args:
        token: The plain token string

    Returns:
        Hex-encoded SHA-256 hash
    """
    return hashlib.sha256(token.encode()).hexdigest()
