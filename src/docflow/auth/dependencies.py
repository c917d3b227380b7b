"""FastAPI dependencies for authentication and authorization.

This module provides dependency injection functions for:
- Extracting and validating JWT tokens from requests
- Loading the current authenticated user

Usage:
    @router.get("/protected")
    def protected_endpoint(user: User = Depends(get_current_user)):
        return {"message": f"Hello {user.name}"}
"""

from typing import Annotated

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.user import User
from .jwt import decode_token


# HTTP Bearer token security scheme
security = HTTPBearer()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Extract and validate the bearer token, returning the authenticated user.

    This dependency:
    1. Extracts Bearer token from Authorization header
    2. Validates token signature and expiration
    3. Loads user from database
    4. Returns User object for use in endpoint

    Raises:
        HTTPException 401: If token is missing, invalid, expired, or user not found
    """
    try:
        payload = decode_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except jwt.InvalidTokenError as e:
        raise _unauthorized(f"Invalid token: {str(e)}")

    user_id_str = payload.get("sub")
    if not user_id_str:
        raise _unauthorized("Invalid token: missing user ID claim")

    try:
        user_id = int(user_id_str)
    except (TypeError, ValueError):
        raise _unauthorized(f"Invalid token claims: sub={user_id_str!r}")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise _unauthorized("User not found")

    return user


# Type alias for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
