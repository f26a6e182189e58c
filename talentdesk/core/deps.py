"""
FastAPI dependencies for authentication.

Protected endpoints depend on get_current_admin, which verifies the bearer
token and exposes the identity embedded in it. No role check is applied.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError

from talentdesk.core.exceptions import AuthError
from talentdesk.core.security import decode_token
from talentdesk.schemas.admin_user import TokenIdentity

# HTTP Bearer token scheme (Authorization: Bearer <token>).
# auto_error is off so a missing header is reported as 401 through AuthError.
security = HTTPBearer(auto_error=False)


async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> TokenIdentity:
    """
    Extract and validate the caller's identity from the JWT.

    Raises:
        AuthError: If the header is missing or malformed, or the token is invalid or expired
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthError("No token provided")

    try:
        payload = decode_token(credentials.credentials)
        admin_id = int(payload["sub"])
    except (JWTError, KeyError, TypeError, ValueError):
        raise AuthError("Invalid or expired token")

    role = payload.get("role")
    return TokenIdentity(
        id=admin_id,
        uuid=payload.get("uuid"),
        role=role if role and role.strip() else "admin",
    )
