"""JWT token generation and validation

Bearer tokens identify the principal behind every request. Issuing tokens
is the job of an external identity service; create_access_token exists for
provisioning scripts and tests.

JWT Token Claims Structure:
===========================

Standard JWT Claims:
- sub (Subject): User ID as a string
  Example: "5"
- iat (Issued At): Unix timestamp when token was created
- exp (Expiration): Unix timestamp when token expires

Custom Claims:
- username: Principal username, recorded in created_by / updated_by
- role: "USER" | "ADMIN"

Example Token Payload:
{
  "sub": "5",
  "username": "jdoe",
  "role": "USER",
  "iat": 1704368400,
  "exp": 1704372000
}
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional

import jwt

from ..config import get_settings


def create_access_token(
    user_id: int,
    username: str,
    role: str,
    expires_in_minutes: Optional[int] = None
) -> str:
    """Create a signed JWT access token for a user.

    Args:
        user_id: User's ID
        username: User's username
        role: User's role (USER, ADMIN)
        expires_in_minutes: Override for JWT_EXPIRY_MINUTES

    Returns:
        str: Signed JWT token
    """
    settings = get_settings()
    if expires_in_minutes is None:
        expires_in_minutes = settings.JWT_EXPIRY_MINUTES

    now = datetime.now(timezone.utc)
    expiration = now + timedelta(minutes=expires_in_minutes)

    payload = {
        'sub': str(user_id),
        'username': username,
        'role': role.value if hasattr(role, 'value') else role,
        'iat': int(now.timestamp()),
        'exp': int(expiration.timestamp())
    }

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        dict: Decoded token payload with claims

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
    """
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
