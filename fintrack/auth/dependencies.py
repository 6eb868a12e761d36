"""
FastAPI dependencies for authentication.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status, Request
from sqlalchemy.orm import Session

from fintrack.db.database import get_db
from fintrack.db.models import User
from fintrack.auth.jwt import decode_token


def get_token_from_request(request: Request) -> Optional[str]:
    """
    Extract JWT token from request.

    Checks the Authorization header (Bearer token) first, then the
    access_token cookie.
    """
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]

    return request.cookies.get("access_token")


async def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
) -> User:
    """
    Get the current authenticated user.

    Raises HTTPException 401 if the token is missing, invalid, not an access
    token, or names an inactive or deleted user.
    """
    user = None
    token = get_token_from_request(request)
    payload = decode_token(token) if token else None

    if payload and payload.get("type") == "access" and payload.get("sub"):
        user = db.query(User).filter(
            User.id == payload["sub"],
            User.is_deleted == False,
            User.is_active == True,
        ).first()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user
